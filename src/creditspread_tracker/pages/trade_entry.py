import streamlit as st

from creditspread_tracker.calculations import position_size
from creditspread_tracker.data_models import TradeInput
from creditspread_tracker.errors import TrackerError
from creditspread_tracker.session import get_config, get_desk, load_vix, tr
from creditspread_tracker.utils import format_currency

st.set_page_config(page_title="Trade Entry", layout="wide")
st.title(tr("📝 信用价差交易录入", "📝 Credit Spread Entry"))

desk = get_desk()

TYPE_KEYS = {"bullPut": tr("牛市看跌价差 (Bull Put)", "Bull Put Spread"),
             "bearCall": tr("熊市看涨价差 (Bear Call)", "Bear Call Spread")}
trade_type = st.radio(tr("策略类型", "Spread type"), list(TYPE_KEYS), format_func=TYPE_KEYS.get, horizontal=True)

with st.form("trade_form"):
    c1, c2 = st.columns(2)
    underlying = c1.text_input(tr("标的代码", "Underlying"), "SPY").upper()
    current_price = c2.number_input(tr("标的现价（$）", "Current price ($)"), min_value=0.0, value=570.0, step=0.5)
    short_strike = c1.number_input(tr("卖出行权价", "Short strike"), min_value=0.0,
                                   value=565.0 if trade_type == "bullPut" else 575.0, step=1.0)
    long_strike = c2.number_input(tr("买入行权价", "Long strike"), min_value=0.0,
                                  value=560.0 if trade_type == "bullPut" else 580.0, step=1.0)
    credit = c1.number_input(tr("收到的权利金（每张，$）", "Credit received per contract ($)"),
                             min_value=0.0, value=150.0, step=5.0,
                             help=tr("例如 1.50 × 100 = 150", "e.g. 1.50 x 100 = 150"))
    dte = c2.number_input(tr("到期天数 (DTE)", "Days to expiration"), min_value=0, max_value=365,
                          value=int(desk.settings.default_dte), step=1)
    b1, b2 = st.columns(2)
    do_analyze = b1.form_submit_button(tr("分析交易", "Analyze trade"))
    do_add = b2.form_submit_button(tr("记录交易", "Add trade"))

inputs = TradeInput(
    underlying=underlying,
    current_price=current_price,
    short_strike=short_strike,
    long_strike=long_strike,
    credit=credit,
    dte=int(dte),
    trade_type=trade_type,
)

if do_analyze or do_add:
    vix = load_vix()
    try:
        review = desk.analyze(inputs, vix_level=vix.level)
    except TrackerError as e:
        st.error(tr("分析失败：", "Error analyzing trade: ") + str(e))
        st.stop()

    a = review.analysis
    m1, m2, m3, m4, m5 = st.columns(5)
    m1.metric(tr("最大盈利", "Max profit"), format_currency(a.max_profit))
    m2.metric(tr("最大亏损", "Max risk"), format_currency(a.max_risk))
    m3.metric(tr("风险收益率", "Return on risk"), f"{a.return_percent}%")
    m4.metric(tr("盈亏平衡点", "Breakeven"), f"${a.breakeven:.2f}")
    m5.metric(tr("盈利概率（估算）", "Profit prob. (heuristic)"), f"{a.profit_probability}%")
    contracts = position_size(desk.ledger.balance, desk.settings.risk_percentage, a.max_risk)
    st.caption(tr(f"在 {desk.settings.risk_percentage:g}% 风险上限内最多可开 {contracts} 张",
                  f"Up to {contracts} contract(s) fit within the {desk.settings.risk_percentage:g}% risk limit"))
    trading = get_config()["trading"]
    if not trading["min_dte"] <= inputs.dte <= trading["max_dte"]:
        st.caption(tr(f"提示：DTE 通常在 {trading['min_dte']}-{trading['max_dte']} 天之间",
                      f"Note: DTE is usually kept between {trading['min_dte']} and {trading['max_dte']} days"))
    if review.risk_check.is_valid:
        st.info("💡 " + review.insight)
    else:
        st.warning("⚠️ " + review.insight)

if do_add:
    try:
        trade = desk.add_trade(inputs)
    except TrackerError as e:
        st.error(tr("无法记录交易：", "Error adding trade: ") + str(e))
    else:
        st.success(tr(f"已记录交易 #{trade.id}", f"Trade #{trade.id} added successfully!"))
