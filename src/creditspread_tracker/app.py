import streamlit as st

from creditspread_tracker.performance import balance_history_frame
from creditspread_tracker.session import LANG_OPTIONS, colored, get_desk, tr
from creditspread_tracker.utils import format_currency, format_percentage

st.set_page_config(page_title="Credit Spread Tracker", layout="wide")

# Global language selector (stored in session state so pages can read it)
if "lang_mode" not in st.session_state:
    st.session_state["lang_mode"] = LANG_OPTIONS[0]

st.sidebar.selectbox(
    "Language / 语言",
    LANG_OPTIONS,
    index=LANG_OPTIONS.index(st.session_state["lang_mode"]),
    key="lang_mode",
)

desk = get_desk()

st.title(tr("信用价差交易看板", "Credit Spread Tracker"))

if desk.load_warning:
    st.warning(tr("已保存的数据无法读取，已使用新账户：", "Saved data could not be loaded, started a fresh account: ")
               + desk.load_warning
               + (tr(f"（原文件已另存为 {desk.rejected_path}）", f" (original file kept as {desk.rejected_path})")
                  if desk.rejected_path else ""))

st.markdown(tr(
    """
    1. **交易录入 (Trade Entry)** – 分析牛市看跌 / 熊市看涨价差并记录交易
    2. **持仓 (Positions)** – 查看未平仓交易、平仓并记录盈亏
    3. **绩效 (Performance)** – 胜率、平均收益、简化夏普比率
    4. **市场环境 (Market Conditions)** – VIX、趋势、经济日历与入场时机
    5. **数据管理 (Data Management)** – 导出 / 导入 / 多设备同步 / 备份

    请在左侧导航栏选择页面进入。
    """,
    """
    1. **Trade Entry** – Analyze bull put / bear call spreads and record trades
    2. **Positions** – Open trades, close them and book P&L
    3. **Performance** – Win rate, average trade, simplified Sharpe ratio
    4. **Market Conditions** – VIX, trend, economic calendar and entry timing
    5. **Data Management** – Export / import / device sync / backup

    Use the left navigation to open a page.
    """
))

ledger = desk.ledger
metrics = desk.performance()
positions = desk.positions()
risk = desk.risk_level()

c1, c2, c3, c4 = st.columns(4)
c1.metric(tr("账户余额", "Balance"), format_currency(ledger.balance),
          format_currency(ledger.balance - ledger.starting_balance, include_sign=True))
c2.metric(tr("总收益率", "Total Return"), format_percentage(metrics.total_return, include_sign=True))
c3.metric(tr("未平仓", "Open Positions"), positions.count)
c4.metric(tr("风险资金", "Capital at Risk"), format_currency(positions.capital_at_risk))

risk_color = {"Low Risk": "green", "Medium Risk": "orange"}.get(risk.level, "red")
st.markdown(tr("**风险水平：** ", "**Risk level:** ") + colored(risk.level, risk_color)
            + f" ({format_percentage(risk.percentage)})")

st.subheader(tr("账户余额走势", "Account Balance"))
st.line_chart(balance_history_frame(ledger.account), x="step", y="balance")

timing = desk.timing()
st.subheader(tr("今日入场时机", "Today's Entry Timing"))
st.markdown(f"**{timing.current_day}** · " + colored(timing.entry_rating, timing.color)
            + f" · {timing.week_status} · " + tr("建议 DTE：", "Optimal DTE: ") + str(timing.optimal_dte))
st.caption(timing.analysis)
