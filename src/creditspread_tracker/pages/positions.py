import streamlit as st

from creditspread_tracker.errors import TrackerError
from creditspread_tracker.performance import trade_history_frame
from creditspread_tracker.session import get_desk, tr
from creditspread_tracker.utils import format_currency

st.set_page_config(page_title="Positions", layout="wide")
st.title(tr("📂 持仓与交易记录", "📂 Positions & Trade History"))

desk = get_desk()
flash = st.session_state.pop("positions_flash", None)
if flash:
    st.success(flash)
positions = desk.positions()

c1, c2, c3, c4 = st.columns(4)
c1.metric(tr("未平仓数量", "Open positions"), positions.count)
c2.metric(tr("风险资金", "Capital at risk"), format_currency(positions.capital_at_risk))
c3.metric(tr("最大可能亏损", "Max loss"), format_currency(positions.max_loss))
c4.metric(tr("可用资金", "Available capital"), format_currency(positions.available_capital))

st.bar_chart(
    {tr("金额", "Amount"): {tr("可用资金", "Available"): max(positions.available_capital, 0.0),
                           tr("风险资金", "At risk"): positions.capital_at_risk}},
)

open_trades = desk.ledger.open_trades()
st.subheader(tr("平仓", "Close a trade"))
if not open_trades:
    st.info(tr("当前没有未平仓交易。", "No open trades."))
else:
    labels = {
        t.id: f"#{t.id} · {t.underlying} {t.spread_type.value} {t.short_strike:g}/{t.long_strike:g} · "
              f"{tr('风险', 'risk')} {format_currency(t.max_risk)}"
        for t in open_trades
    }
    with st.form("close_form"):
        trade_id = st.selectbox(tr("选择交易", "Trade"), list(labels), format_func=labels.get)
        pnl = st.number_input(tr("已实现盈亏（$，亏损为负）", "Realized P&L ($, negative for a loss)"),
                              value=0.0, step=10.0)
        submitted = st.form_submit_button(tr("平仓", "Close trade"))
    if submitted:
        try:
            trade = desk.close_trade(trade_id, float(pnl))
        except TrackerError as e:
            st.error(tr("平仓失败：", "Error closing trade: ") + str(e))
        else:
            word = tr("盈利", "profit") if trade.pnl >= 0 else tr("亏损", "loss")
            st.session_state["positions_flash"] = tr(f"已平仓，{word} {format_currency(abs(trade.pnl))}",
                                                     f"Trade closed with {word} of {format_currency(abs(trade.pnl))}")
            st.rerun()

st.subheader(tr("交易记录", "Trade history"))
history = trade_history_frame(desk.ledger.trades)
if history.empty:
    st.info(tr("还没有交易记录。", "No trades recorded yet."))
else:
    st.dataframe(history, use_container_width=True, hide_index=True)
