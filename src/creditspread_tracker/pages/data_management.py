import streamlit as st

from creditspread_tracker.data_models import Settings
from creditspread_tracker.finnhub_client import FinnhubClient
from creditspread_tracker.session import get_config, get_desk, tr
from creditspread_tracker.utils import format_storage_size

st.set_page_config(page_title="Data Management", layout="wide")
st.title(tr("💾 数据管理", "💾 Data Management"))

desk = get_desk()
flash = st.session_state.pop("data_flash", None)
if flash:
    st.success(flash)


def _report(result, ok_cn: str, ok_en: str) -> None:
    if result.ok:
        st.session_state["data_flash"] = tr(ok_cn, ok_en)
        st.rerun()
    st.error(tr("导入失败：", "Import failed: ") + result.message)


# ---- export ----
st.subheader(tr("导出", "Export"))
e1, e2 = st.columns(2)
name, payload = desk.export_data()
e1.download_button(tr("导出数据（JSON）", "Export data (JSON)"), payload, file_name=name, mime="application/json")
if e2.button(tr("生成同步文件", "Prepare sync file")):
    st.session_state["sync_export"] = desk.export_with_sync()
if "sync_export" in st.session_state:
    sync_name, sync_payload = st.session_state["sync_export"]
    e2.download_button(tr("下载同步文件", "Download sync file"), sync_payload,
                       file_name=sync_name, mime="application/json")

status = desk.store.get_sync_status()
st.caption(
    tr("本设备：", "This device: ") + str(status["device_id"]) + " · "
    + (tr("上次同步：", "Last sync: ") + str(status["last_sync"]) if status["has_sync"]
       else tr("尚未同步", "Never synced"))
)

# ---- import ----
st.subheader(tr("导入", "Import"))
i1, i2 = st.columns(2)
upload = i1.file_uploader(tr("导入导出文件", "Import an exported file"), type=["json"], key="import_file")
if upload is not None and i1.button(tr("导入并替换当前数据", "Import and replace current data")):
    _report(desk.import_data(upload.getvalue()), "数据已导入", "Data imported")

sync_upload = i2.file_uploader(tr("导入其他设备的同步文件", "Import a sync file from another device"),
                               type=["json"], key="sync_file")
if sync_upload is not None and i2.button(tr("同步", "Sync")):
    _report(desk.import_sync_data(sync_upload.getvalue()), "已从同步文件更新", "Synced from file")

# ---- settings ----
st.subheader(tr("设置", "Settings"))
with st.form("settings_form"):
    s = desk.settings
    risk_pct = st.slider(tr("单笔最大风险（账户 %）", "Max risk per trade (% of account)"), 1.0, 50.0,
                         float(s.risk_percentage), 0.5)
    default_dte = st.number_input(tr("默认 DTE", "Default DTE"), min_value=1, max_value=365,
                                  value=int(s.default_dte), step=1)
    auto_save = st.checkbox(tr("自动保存", "Auto-save"), value=s.auto_save)
    notifications = st.checkbox(tr("通知", "Notifications"), value=s.notifications)
    if st.form_submit_button(tr("保存设置", "Save settings")):
        desk.update_settings(Settings(risk_percentage=risk_pct, default_dte=int(default_dte),
                                      auto_save=auto_save, notifications=notifications))
        st.success(tr("设置已保存", "Settings saved"))
if not desk.settings.auto_save and st.button(tr("立即保存数据", "Save data now")):
    if desk.save():
        st.success(tr("已保存", "Saved"))
    else:
        st.error(tr("保存失败", "Save failed"))

# ---- market data key ----
st.subheader("Finnhub API")
market_cfg = get_config()["market"]
api_key = st.text_input(tr("API Key（经济日历）", "API key (economic calendar)"),
                        value=market_cfg["finnhub_api_key"], type="password")
if st.button(tr("测试 API Key", "Test API key")):
    check = FinnhubClient(api_key, market_cfg["finnhub_base_url"]).test_api_key()
    if check["valid"]:
        st.success(check["message"])
    else:
        st.error(check["error"])
st.caption(tr("长期使用请在 .env 中设置 FINNHUB_API_KEY。", "Set FINNHUB_API_KEY in .env to keep it across restarts."))

# ---- backup / reset ----
st.subheader(tr("备份与重置", "Backup & reset"))
info = desk.store.get_storage_info()
st.caption(tr("数据目录：", "Data directory: ") + str(desk.store.data_dir) + " · "
           + format_storage_size(info["data_size"]))
b1, b2, b3 = st.columns(3)
if b1.button(tr("创建备份", "Create backup")):
    if desk.store.create_backup(desk.ledger.to_record()):
        st.success(tr("备份已创建", "Backup created"))
if b2.button(tr("从备份恢复", "Restore backup"), disabled=not info["has_backup"]):
    _report(desk.restore_backup(), "已从备份恢复", "Restored from backup")
confirm = b3.checkbox(tr("确认清除所有数据", "I want to clear all data"))
if b3.button(tr("清除所有数据", "Clear all data"), disabled=not confirm):
    desk.clear_all()
    st.session_state["data_flash"] = tr("已清除（旧数据已放入备份）", "Cleared (previous data moved to backup)")
    st.rerun()
