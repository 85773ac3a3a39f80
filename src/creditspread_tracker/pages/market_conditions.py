import datetime as dt

import pandas as pd
import streamlit as st

from creditspread_tracker.market import (
    analyze_calendar_risk,
    analyze_overall_trend,
    analyze_vix_environment,
    score_color,
    trend_color,
)
from creditspread_tracker.session import colored, get_config, get_desk, load_calendar, load_ticker, load_vix, tr

st.set_page_config(page_title="Market Conditions", layout="wide")
st.title(tr("🌡️ 市场环境与入场时机", "🌡️ Market Conditions & Timing"))

desk = get_desk()
symbols = get_config()["market"]["symbols"]

if st.button(tr("刷新市场数据", "Refresh market data")):
    st.cache_data.clear()

# ---- VIX ----
st.subheader("VIX")
vix = load_vix()
vix_env = analyze_vix_environment(vix.level)
v1, v2 = st.columns([1, 3])
v1.metric("VIX", f"{vix.level:.2f}" if vix.level is not None else tr("数据不可用", "Data Unavailable"),
          f"{vix.change_percent:+.2f}%" if vix.change_percent is not None else None, delta_color="inverse")
v2.markdown(colored(f"{vix_env.environment} · {vix_env.recommendation}", vix_env.color))
v2.caption(vix_env.analysis + (f" ({tr('更新于', 'updated')} {vix.last_update})" if vix.last_update else ""))

# ---- trend ----
st.subheader(tr("趋势", "Trend"))
spy = load_ticker(symbols["spy"])
qqq = load_ticker(symbols["qqq"])
overall = analyze_overall_trend(spy, qqq)
t1, t2, t3 = st.columns(3)
for col, snap in ((t1, spy), (t2, qqq)):
    price = f"${snap.current_price:,.2f}" if snap.current_price is not None else tr("数据不可用", "Data Unavailable")
    col.metric(snap.symbol, price, f"{snap.trend.change:+.2f}%" if snap.error is None else None)
    col.markdown(colored(snap.trend.direction, trend_color(snap.trend.direction)) + f" · {snap.trend.strength}")
t3.markdown(tr("**综合：** ", "**Overall:** ") + colored(overall.environment, overall.color)
            + f" ({overall.strength})")
t3.caption(overall.analysis)

chart = {}
for snap in (spy, qqq):
    if snap.prices:
        base = snap.prices[0]
        chart[snap.symbol] = pd.Series([(p / base - 1.0) * 100.0 for p in snap.prices], index=snap.dates)
if chart:
    st.line_chart(pd.DataFrame(chart))
    st.caption(tr("最近 10 个交易日涨跌幅（%）", "Change over the last 10 sessions (%)"))

# ---- economic calendar ----
st.subheader(tr("经济日历（未来 7 天）", "Economic calendar (next 7 days)"))
cal = load_calendar(dt.date.today())
if cal.needs_api_key:
    st.info(tr("请在环境变量 FINNHUB_API_KEY 中配置 Finnhub API Key。",
               "Set FINNHUB_API_KEY in the environment (or .env) to load the calendar."))
elif cal.error:
    st.warning(tr("经济日历获取失败：", "Could not load the economic calendar: ") + cal.error)
else:
    risk = analyze_calendar_risk(cal.events)
    st.markdown(colored(f"{risk.risk_level} · {risk.advice}", risk.color))
    st.caption(risk.analysis)
    if cal.events:
        st.dataframe(
            pd.DataFrame([e.model_dump() for e in cal.events])[["date", "time", "name", "impact", "country"]],
            use_container_width=True, hide_index=True,
        )

# ---- timing ----
st.subheader(tr("入场时机", "Entry timing"))
timing = desk.timing()
s1, s2, s3 = st.columns(3)
s1.markdown(f"**{timing.current_day}** · " + colored(timing.entry_rating, timing.color))
s1.caption(timing.analysis)
s2.metric(tr("本周状态", "Week status"), timing.week_status)
s3.metric(tr("建议 DTE", "Optimal DTE"), timing.optimal_dte,
          help=tr(f"目标 {desk.settings.default_dte} 天", f"Target {desk.settings.default_dte} days"))
st.markdown("  ".join(f"{day.title()}: " + colored(str(score), score_color(score))
                      for day, score in timing.day_scores.items()))
st.caption(tr("更新于 ", "Last update ") + timing.last_update)
