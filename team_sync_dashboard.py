"""Team Sync engagement dashboard.

A Streamlit app over the engines: recommendations with save / like / dislike,
analytics for a chosen range, and the team's points and badges. Team and quiz
context come from the sidebar.
"""

import asyncio
import logging

import plotly.graph_objects as go  # type: ignore[import-untyped]
import streamlit as st
from dotenv import load_dotenv

load_dotenv()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

from team_sync.activity_models import QuizContext, TeamContext, activities_for
from team_sync.engine.gamification import BADGE_RULES
from team_sync.service import Recommendation, TeamSyncService, build_service


st.set_page_config(page_title="Team Sync", page_icon="🦸", layout="wide")
st.title("🦸 Team Sync")


# ---------------------------------------------------------------------------
# Session state
# ---------------------------------------------------------------------------
def _service() -> TeamSyncService:
    if "service" not in st.session_state:
        st.session_state.service = build_service()
    return st.session_state.service


def _run(coro):
    return asyncio.run(coro)


service = _service()


# ---------------------------------------------------------------------------
# Sidebar: team + quiz context
# ---------------------------------------------------------------------------
with st.sidebar:
    st.header("Team")
    team_name = st.text_input("Team name", value="Avengers")
    department = st.selectbox(
        "Department",
        ["General", "Leadership", "Sales", "Product", "Operations", "QA", "Dev",
         "Engineering", "Marketing", "HR"],
    )
    mode = st.radio("Work mode", ["remote", "in_person", "hybrid"], index=2, horizontal=True)
    size = st.number_input("Team size", min_value=0, max_value=500, value=8)

    st.header("Quiz")
    energy = st.select_slider("Energy", ["chill", "balanced", "high"], value="balanced")
    budget = st.select_slider("Budget", ["low", "medium", "high"], value="medium")
    interests = st.multiselect(
        "Interests",
        ["games", "creative", "music", "food", "wellness", "strategy", "collaboration",
         "communication", "creativity", "problem-solving", "outdoors"],
        default=["games"],
    )

try:
    team = TeamContext(name=team_name, department=department, mode=mode, size=int(size))
except ValueError as e:
    st.sidebar.error(f"Team name: {e}")
    team = TeamContext(department=department, mode=mode, size=int(size))
quiz = QuizContext(energy=energy, budget=budget, interests=interests)
team_id = team.name or team.department


# ---------------------------------------------------------------------------
# Tabs
# ---------------------------------------------------------------------------
tab_recs, tab_analytics, tab_badges = st.tabs(["💡 Recommendations", "📈 Analytics", "🏅 Badges"])


def _render_card(rec: Recommendation, key_prefix: str) -> None:
    act = rec.activity
    with st.container(border=True):
        header = f"**{act.title}**"
        if rec.department_exclusive:
            header += f"  ·  ⭐ {team.department} exclusive"
        st.markdown(header)
        st.caption(f"🎯 {rec.fit_score:.0f} · ⏱ {act.duration} min · 💰 {act.budget} · 🦸 {act.hero_alignment or 'Ally'}")
        st.write(act.description)
        if act.placeholder:
            return
        c1, c2, c3 = st.columns(3)
        if c1.button("Save", key=f"{key_prefix}-save-{act.id}"):
            _run(service.save_activity(act, department=team.department))
            _run(service.record_award(team_id, "save", {"activity_id": act.id, "title": act.title}))
            st.toast(f"{act.title} saved")
        if c2.button("👍", key=f"{key_prefix}-like-{act.id}"):
            _run(service.submit_feedback(act.id, "like", title=act.title, rating=4))
            _run(service.record_award(team_id, "feedback", {"activity_id": act.id, "value": "like"}))
            st.toast(f"Noted. We'll show more like {act.title}.")
        if c3.button("👎", key=f"{key_prefix}-dislike-{act.id}"):
            _run(service.submit_feedback(act.id, "dislike", title=act.title, rating=2))
            _run(service.record_award(team_id, "feedback", {"activity_id": act.id, "value": "dislike"}))
            st.toast(f"Got it. We'll show fewer like {act.title}.")


with tab_recs:
    col_a, col_b = st.columns(2)
    if col_a.button("Try another set") or "recs" not in st.session_state:
        st.session_state.recs = _run(service.get_recommendations(team, quiz))
    if col_b.button("✨ Generate AI ideas"):
        st.session_state.recs = _run(service.generate_ai_ideas(team, quiz))
    for rec in st.session_state.recs:
        _render_card(rec, rec.source)

    with st.expander(f"Browse the {team.department} catalog"):
        for act in activities_for(team.department):
            scope = ", ".join(act.department_scope) or "all departments"
            st.markdown(f"**{act.title}** · {act.duration} min · {act.budget} · {scope}")
            st.caption(act.description)

    with st.expander("Leave a comment"):
        options = {r.activity.title: r.activity for r in st.session_state.recs if not r.activity.placeholder}
        chosen = st.selectbox("Activity", list(options))
        comment = st.text_area("Comment (use #tags)")
        rating = st.slider("Rating", 0, 5, 4)
        if st.button("Submit feedback") and chosen:
            act = options[chosen]
            _run(service.submit_feedback(act.id, None, title=act.title, comment=comment, rating=rating))
            _run(service.record_award(team_id, "rating", {"activity_id": act.id, "rating": rating}))
            st.success("Thanks for the feedback!")


with tab_analytics:
    range_ = st.radio("Range", ["4w", "12w", "all"], horizontal=True)
    snapshot = _run(service.get_analytics(range_))

    m1, m2, m3, m4 = st.columns(4)
    m1.metric("Completion", f"{snapshot.success.completion_rate:.0%}")
    m2.metric("Like ratio", f"{snapshot.success.like_ratio:.0%}")
    m3.metric("Avg rating", f"{snapshot.success.avg_rating:.1f}")
    m4.metric("Sentiment", snapshot.sentiment.label, f"{snapshot.sentiment.score:+.2f}")

    labels = [b.label for b in snapshot.trends]
    fig_trend = go.Figure([
        go.Bar(name="Likes", x=labels, y=[b.likes for b in snapshot.trends], marker_color="#2BD9C9"),
        go.Bar(name="Dislikes", x=labels, y=[b.dislikes for b in snapshot.trends], marker_color="#7D83FF"),
    ])
    fig_trend.update_layout(barmode="stack", height=320, margin=dict(t=20, b=20))
    st.plotly_chart(fig_trend, use_container_width=True)

    tagged = [b for b in snapshot.trends if b.top_tag]
    if tagged:
        st.caption("Top tags: " + ", ".join(f"{b.label} #{b.top_tag} ({b.top_tag_count})" for b in tagged))

    if snapshot.hero_breakdown:
        fig_hero = go.Figure(go.Pie(
            labels=[h.hero for h in snapshot.hero_breakdown],
            values=[h.pct for h in snapshot.hero_breakdown],
            hole=0.45,
        ))
        fig_hero.update_layout(height=320, margin=dict(t=20, b=20))
        st.plotly_chart(fig_hero, use_container_width=True)

    persona = _run(service.generate_persona(team, quiz))
    st.subheader(persona.name)
    st.write(persona.summary)


with tab_badges:
    state = _run(service.get_gamification(team_id))
    just_earned = service.gamification.last_earned(team_id)
    if just_earned:
        st.balloons()
        st.success(f"New badge: {just_earned}")
    st.metric("Points", state.points)
    for rule in BADGE_RULES:
        held = state.has_badge(rule.id)
        st.write(f"{'🏅' if held else '🔒'} **{rule.name}**: {rule.description}")
