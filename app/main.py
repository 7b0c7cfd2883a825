"""
Streamlit Frontend for Finanz-Manager

One page with:
1. Profile selection and profile settings (tax rate, month filter, webhooks)
2. Entry form and the filtered entry list
3. Summary cards for the filtered period
4. Export / import and webhook buttons

All state lives in a LedgerApp kept in st.session_state; every widget
callback goes through it, so each change is persisted immediately.
"""

import asyncio
from datetime import date

import streamlit as st

from finanzmanager.exports import ExportFormat, format_currency, format_signed_amount
from finanzmanager.models.ledger import TransactionType
from finanzmanager.orchestrator import LedgerApp, create_app_components
from finanzmanager.state import StatusType, tax_rate_input_bounds


# Page configuration
st.set_page_config(
    page_title="Finanz-Manager Pro",
    page_icon="💼",
    layout="wide",
)

st.markdown("""
<style>
    .status-badge {
        padding: 6px 14px;
        border-radius: 999px;
        font-size: 0.8em;
        font-weight: bold;
        display: inline-block;
    }
    .status-info { background-color: #eef2ff; color: #4338ca; }
    .status-success { background-color: #f0fdf4; color: #15803d; }
    .status-error { background-color: #fef2f2; color: #b91c1c; }
</style>
""", unsafe_allow_html=True)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def get_app() -> LedgerApp:
    """Get or create the application for this browser session."""
    if "ledger_app" not in st.session_state:
        app = create_app_components(use_storage=True)
        run_async(app.load())
        st.session_state.ledger_app = app
    return st.session_state.ledger_app


def render_header(app: LedgerApp):
    col1, col2 = st.columns([3, 1])
    with col1:
        st.title("💼 Finanz-Manager Pro")
        st.caption("Verwalten Sie Ihre Finanzen professionell")
    with col2:
        status = app.state.status
        css = {
            StatusType.SUCCESS: "status-success",
            StatusType.ERROR: "status-error",
        }.get(status.type, "status-info")
        st.markdown(
            f'<span class="status-badge {css}">{status.message}</span>',
            unsafe_allow_html=True,
        )


def render_profile_section(app: LedgerApp):
    profile = app.active_profile
    profiles = app.state.store.profiles

    col1, col2, col3, col4 = st.columns([3, 2, 2, 2])

    with col1:
        ids = list(profiles)
        selected = st.selectbox(
            "🏢 Profil / Unternehmen",
            options=ids,
            index=ids.index(profile.id),
            format_func=lambda pid: profiles[pid].name or pid,
        )
        if selected != profile.id:
            run_async(app.select_profile(selected))
            st.rerun()

    with col2:
        new_name = st.text_input("Name des neuen Profils", key="new_profile_name")
        if st.button("➕ Profil anlegen") and new_name:
            run_async(app.add_profile(new_name))
            st.rerun()

    with col3:
        confirm = st.checkbox("Löschen bestätigen", disabled=len(profiles) <= 1)
        if st.button("🗑️ Profil löschen", disabled=len(profiles) <= 1 or not confirm):
            run_async(app.delete_profile())
            st.rerun()

    with col4:
        low, high = tax_rate_input_bounds(profile.tax_rate)
        tax_rate = st.number_input(
            "Steuersatz (%)",
            min_value=low,
            max_value=high,
            value=float(profile.tax_rate),
            step=0.5,
        )

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        name = st.text_input("Firmenname", value=profile.name)
    with col2:
        responsible = st.text_input("Verantwortlich", value=profile.responsible)
    with col3:
        tax_id = st.text_input("Steuernummer", value=profile.tax_id)
    with col4:
        month_filter = st.text_input(
            "📅 Monatsfilter (YYYY-MM)",
            value=profile.month_filter,
            help="Leer lassen für den Gesamtzeitraum",
        )

    col1, col2 = st.columns(2)
    with col1:
        webhook1 = st.text_input("Discord Webhook 1", value=profile.webhook1)
    with col2:
        webhook2 = st.text_input("Discord Webhook 2", value=profile.webhook2)

    if run_async(app.update_profile(
        name=name,
        responsible=responsible,
        tax_id=tax_id,
        tax_rate=tax_rate,
        month_filter=month_filter,
        webhook1=webhook1,
        webhook2=webhook2,
    )):
        st.rerun()


def render_entry_form(app: LedgerApp):
    st.subheader("Neuer Eintrag")
    form = app.state.form

    with st.form("entry_form", clear_on_submit=False):
        entry_date = st.date_input("Datum", value=date.fromisoformat(form.date))
        description = st.text_input("Beschreibung", value=form.description)
        amount = st.text_input("Betrag ($)", value=form.amount)
        entry_type = st.radio(
            "Typ",
            options=list(TransactionType),
            index=list(TransactionType).index(form.type),
            format_func=lambda t: t.value,
            horizontal=True,
        )
        submitted = st.form_submit_button("➕ Hinzufügen", type="primary")

    if submitted:
        app.set_form(
            date=entry_date.isoformat(),
            description=description,
            amount=amount,
            type=entry_type,
        )
        run_async(app.add_entry())
        st.rerun()


def render_summary(app: LedgerApp):
    summary = app.view.summary
    profile = app.active_profile

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Einnahmen", format_currency(summary.income))
    col2.metric("Ausgaben", format_currency(summary.expense))
    col3.metric(f"Steuer ({profile.tax_rate:g}%)", format_currency(summary.tax))
    col4.metric("Gewinn", format_currency(summary.net))


def render_entries(app: LedgerApp):
    entries = app.view.filtered_entries
    period = app.active_profile.month_filter or "Gesamtzeitraum"
    st.subheader(f"Einträge ({period})")

    if not entries:
        st.info("Keine Einträge vorhanden")
        return

    for entry in entries:
        col1, col2, col3, col4 = st.columns([2, 5, 2, 1])
        col1.write(entry.date)
        col2.write(entry.description)
        col3.write(format_signed_amount(entry))
        if col4.button("🗑️", key=f"delete_{entry.id}"):
            run_async(app.delete_entry(entry.id))
            st.rerun()


def render_actions(app: LedgerApp):
    st.subheader("Export & Versand")
    col1, col2, col3, col4 = st.columns(4)

    # Prepared artifacts are only offered while the store they were built from is current
    prepared = st.session_state.setdefault("prepared_exports", {})
    for col, export_format, label in (
        (col1, ExportFormat.JSON, "📥 JSON"),
        (col2, ExportFormat.CSV, "📊 CSV"),
        (col3, ExportFormat.PDF, "📄 PDF"),
    ):
        with col:
            if st.button(f"{label} erstellen", key=f"prepare_{export_format.value}"):
                prepared[export_format] = (app.state.store, run_async(app.export(export_format)))
            source, artifact = prepared.get(export_format, (None, None))
            if artifact is not None and source is app.state.store:
                st.download_button(
                    f"{label} herunterladen",
                    data=artifact.content,
                    file_name=artifact.filename,
                    mime=artifact.mime_type,
                )

    with col4:
        uploaded = st.file_uploader("📤 Import (JSON)", type=["json"])
        if uploaded is not None and st.button("Importieren"):
            run_async(app.import_file(uploaded.read()))
            st.rerun()

    col1, col2, col3 = st.columns(3)
    for col, hooks, label in (
        (col1, (1,), "🚀 An Webhook 1 senden"),
        (col2, (2,), "🚀 An Webhook 2 senden"),
        (col3, (1, 2), "🚀 An beide senden"),
    ):
        if col.button(label):
            with st.spinner("Sende an Discord..."):
                run_async(app.send_report(hooks))
            st.rerun()


def main():
    """Main application entry point."""
    app = get_app()

    render_header(app)
    st.markdown("---")
    render_profile_section(app)
    st.markdown("---")

    left, right = st.columns([1, 2])
    with left:
        render_entry_form(app)
    with right:
        render_summary(app)
        render_entries(app)

    st.markdown("---")
    render_actions(app)


if __name__ == "__main__":
    main()
