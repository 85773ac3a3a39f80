import pandas as pd
import streamlit as st

from creditspread_tracker.performance import balance_history_frame, return_on_risk
from creditspread_tracker.session import get_desk, tr
from creditspread_tracker.utils import format_currency, format_percentage

st.set_page_config(page_title="Performance", layout="wide")
st.title(tr("📊 绩效统计", "📊 Performance"))

desk = get_desk()
m = desk.performance()

if m.closed_trades == 0:
    st.info(tr("还没有已平仓的交易，所有指标为 0。", "No closed trades yet, all metrics are zero."))

c1, c2, c3, c4 = st.columns(4)
c1.metric(tr("总收益率", "Total return"), format_percentage(m.total_return, include_sign=True))
c2.metric(tr("月收益率", "Monthly return"), format_percentage(m.monthly_return, include_sign=True))
c3.metric(tr("胜率", "Win rate"), format_percentage(m.win_rate))
c4.metric(tr("简化夏普比率", "Simplified Sharpe"), f"{m.sharpe_ratio:.2f}",
          help=tr("每笔交易风险收益率的均值/标准差，未年化，不是真正的夏普比率。",
                  "Mean / std of per-trade return on risk. Not annualized; not a true Sharpe ratio."))

c5, c6, c7, c8 = st.columns(4)
c5.metric(tr("平均每笔", "Avg trade"), format_currency(m.avg_return, include_sign=True))
c6.metric(tr("最佳交易", "Best trade"), format_currency(m.best_trade, include_sign=True))
c7.metric(tr("最差交易", "Worst trade"), format_currency(m.worst_trade, include_sign=True))
c8.metric(tr("已实现盈亏", "Realized P&L"), format_currency(m.total_pnl, include_sign=True))

st.subheader(tr("账户余额走势", "Account balance"))
st.line_chart(balance_history_frame(desk.ledger.account), x="step", y="balance")

closed = desk.ledger.closed_trades()
if closed:
    st.subheader(tr("每笔交易盈亏", "P&L per closed trade"))
    per_trade = pd.DataFrame({
        "trade": [f"#{t.id}" for t in closed],
        "pnl": [t.pnl for t in closed],
        "return_on_risk_pct": [round(r, 1) for r in return_on_risk(closed)],
    })
    st.bar_chart(per_trade, x="trade", y="pnl")
    st.dataframe(per_trade, use_container_width=True, hide_index=True)
