#!/usr/bin/env python3
from __future__ import annotations

import streamlit as st

from member_lookup.config import load_settings
from member_lookup.export import records_to_frame
from member_lookup.presentation import FIELD_LABELS, member_card, sync_caption
from member_lookup.search import search_members
from member_lookup.sync import SOURCE_CACHE, sync_members


@st.cache_resource(show_spinner=False)
def app_settings():
    return load_settings()


def ensure_state() -> None:
    st.session_state.setdefault("outcome", None)
    st.session_state.setdefault("search_input", "")


def run_sync() -> None:
    with st.spinner("Syncing with Google Sheets..."):
        st.session_state["outcome"] = sync_members(app_settings())


def set_visuals() -> None:
    st.markdown(
        """
        <style>
        .member-badge { padding: 0.2rem 0.8rem; border-radius: 999px; font-weight: 800; font-size: 0.75rem; }
        .member-badge.overdue { background: #fef2f2; color: #ef4444; border: 1px solid #fee2e2; }
        .member-badge.current { background: #ecfdf5; color: #10b981; border: 1px solid #d1fae5; }
        .member-meta { color: #94a3b8; font-size: 0.7rem; font-weight: 800; letter-spacing: 0.2em; text-transform: uppercase; }
        </style>
        """,
        unsafe_allow_html=True,
    )


def render_member(card: dict) -> None:
    with st.container(border=True):
        title_col, badge_col = st.columns([4, 1])
        with title_col:
            st.subheader(card["account_name"])
            st.caption(FIELD_LABELS["account_number"])
            st.code(card["account_number"], language=None)
        with badge_col:
            css = "overdue" if card["is_overdue"] else "current"
            st.markdown(f'<span class="member-badge {css}">{card["status"]}</span>', unsafe_allow_html=True)
        cols = st.columns(4)
        for col, name in zip(cols, ("next_due_date", "next_due_amount", "bps", "overdue_amount")):
            col.metric(FIELD_LABELS[name], card[name])


def render_results(outcome, query: str) -> None:
    settings = app_settings()
    records = outcome.result.records
    if not query.strip():
        st.info("Search member records sourced directly from your Google Sheet.")
        return
    matches = search_members(records, query, limit=settings.search_limit)
    if not matches:
        st.markdown("### No matching members")
        st.caption("Double check the spelling or try searching by account number.")
        return
    st.markdown(f'<div class="member-meta">Found {len(matches)} matching records</div>', unsafe_allow_html=True)
    for record in matches:
        render_member(member_card(record, settings.currency_symbol))
    with st.expander("Table view"):
        st.dataframe(records_to_frame(matches), width="stretch", hide_index=True)


def main() -> None:
    st.set_page_config(page_title="Member Lookup", layout="wide")
    set_visuals()
    ensure_state()

    if st.session_state["outcome"] is None:
        run_sync()
    outcome = st.session_state["outcome"]

    header_col, button_col = st.columns([4, 1])
    with header_col:
        st.title("Member Lookup")
        st.markdown(
            f'<div class="member-meta">{sync_caption(outcome.result.metadata_date if outcome.has_data else None)}</div>',
            unsafe_allow_html=True,
        )
    with button_col:
        if st.button("Sync Now", type="primary", width="stretch"):
            run_sync()
            st.rerun()

    if outcome.source == SOURCE_CACHE and outcome.error:
        st.warning(f"Showing the last saved copy. {outcome.error}")

    if not outcome.has_data:
        st.error(
            "Connection Error: we couldn't reach the Google Sheet database. "
            "Please check the public visibility of your sheet."
        )
        if st.button("Retry Connection"):
            run_sync()
            st.rerun()
        return

    query = st.text_input(
        "Search",
        key="search_input",
        placeholder="Search by name or account number...",
        label_visibility="collapsed",
    )
    st.markdown(
        f'<div class="member-meta">Searching {len(outcome.result.records):,} active member records</div>',
        unsafe_allow_html=True,
    )
    render_results(outcome, query)


if __name__ == "__main__":
    main()
