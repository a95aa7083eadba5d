import json
import logging
from concurrent.futures import ThreadPoolExecutor

import streamlit as st

from ldtk.data import CONCRETE_TABLE, METAL_TABLE, ROOF_TYPES, WDB_63, WDS_48, RoofType, table_frame
from ldtk.notify import (
    NotificationSummary,
    ParentWindowStatsReporter,
    SheetStatsReporter,
    SmtpEmailSender,
    notify_all,
)
from ldtk.render import compose_email_body, escape_markdown, summary_frame, template_params
from ldtk.settings import (
    MAX_NEW_THICKNESS,
    MAX_OLD_THICKNESS,
    NEW_THICKNESS_STEP,
    OLD_THICKNESS_STEP,
    configure_logging,
    load_smtp_config,
    load_stats_sheet,
    load_variant,
)
from ldtk.theme import THEMES
from ldtk.wizard import (
    STEPS,
    AcceptDisclaimer,
    AdvanceStep,
    Calculate,
    GoBack,
    Reset,
    SelectRoofType,
    SetNewThickness,
    SetOldThickness,
    SubmitEmail,
    ToggleOldInsulation,
    ToggleTheme,
    WizardState,
    reduce,
)

configure_logging()
logger = logging.getLogger("ldtk.app")
VARIANT = load_variant()
FORM_KEYS = ("roof_type", "new_thickness", "has_old_insulation", "old_thickness")

# --- Page config ---
st.set_page_config(page_title="LDTK Konfigurator", page_icon="🔩", layout="centered")

# --- Logo (inline SVG) ---

def logo_svg() -> str:
    return """
    <svg viewBox="0 0 64 64" width="36" height="36" xmlns="http://www.w3.org/2000/svg" aria-hidden="true" role="img">
      <rect x="6" y="6" width="52" height="52" rx="12" fill="#dd0000"/>
      <!-- tube -->
      <rect x="26" y="14" width="12" height="30" rx="2" fill="#ffffff"/>
      <!-- screw tip -->
      <polygon points="28,44 36,44 32,54" fill="#ffffff"/>
    </svg>
    """

# --- State & notifications -----------------------------------------------------

@st.cache_resource
def notification_executor() -> ThreadPoolExecutor:
    return ThreadPoolExecutor(max_workers=2, thread_name_prefix="ldtk-notify")


def get_state() -> WizardState:
    if "wizard" not in st.session_state:
        st.session_state.wizard = WizardState()
    return st.session_state.wizard


def dispatch(action) -> WizardState:
    st.session_state.wizard = reduce(get_state(), action, VARIANT.min_new_thickness)
    return st.session_state.wizard


def background_senders() -> list:
    senders = []
    smtp = load_smtp_config()
    if smtp:
        senders.append(SmtpEmailSender(smtp, VARIANT.template))
    sheet = load_stats_sheet()
    if sheet:
        try:
            raw = st.secrets["gcp_service_account"]
            creds = json.loads(raw) if isinstance(raw, str) else dict(raw)
            senders.append(SheetStatsReporter(sheet[0], sheet[1], creds))
        except Exception:
            logger.exception("stats sheet configured without usable gcp_service_account")
    return senders


def run_calculation() -> None:
    state = dispatch(Calculate())
    summary = NotificationSummary(state.email, state.to_input(), state.recommendations)
    notify_all(summary, background_senders(), executor=notification_executor())
    # the stats frame has to be rendered in the script body of the next run
    st.session_state.pending_stats = summary


def seed(key: str, value) -> None:
    """Give a keyed widget its starting value from the wizard state."""
    if key not in st.session_state:
        st.session_state[key] = value


def on_roof_type() -> None:
    dispatch(SelectRoofType(RoofType(st.session_state.roof_type)))


def on_new_thickness() -> None:
    dispatch(SetNewThickness(st.session_state.new_thickness))


def on_old_insulation() -> None:
    dispatch(ToggleOldInsulation(st.session_state.has_old_insulation))


def on_old_thickness() -> None:
    dispatch(SetOldThickness(st.session_state.old_thickness))


def on_dark_mode() -> None:
    if st.session_state.dark_mode != (get_state().theme_mode == "dark"):
        dispatch(ToggleTheme())


def error_text(state: WizardState, key: str) -> None:
    if key in state.errors:
        st.error(state.errors[key])


def stepper_html(active: int) -> str:
    cells = []
    for i, label in enumerate(STEPS):
        cls = "step-dot active" if i <= active else "step-dot"
        weight = 600 if i == active else 400
        cells.append(
            f"<div style='flex:1;text-align:center'>"
            f"<div class='{cls}' style='width:32px;height:32px;border-radius:50%;margin:0 auto;"
            f"color:#fff;line-height:32px'>{i + 1}</div>"
            f"<div style='font-size:0.8rem;font-weight:{weight};margin-top:4px'>{label}</div></div>"
        )
    return "<div style='display:flex;margin-bottom:24px'>" + "".join(cells) + "</div>"

# --- MAIN APP UI ---------------------------------------------------------------

state = get_state()
st.markdown(THEMES[state.theme_mode], unsafe_allow_html=True)
st.markdown(
    f"<div style='display:flex;justify-content:center;align-items:center;gap:10px'>{logo_svg()}"
    f"<h1 class='app-title' style='margin:0'>{VARIANT.title}</h1></div>",
    unsafe_allow_html=True,
)

# 1) Disclaimer
if not state.disclaimer_accepted:
    st.subheader("Ważna informacja")
    st.markdown(
        """
Niniejszy konfigurator określa długość połączenia dla dachu, na którym zastosowana ma być określona grubość docieplenia.
W celu doboru łączników na dachu ze spadkami niezbędne jest wykonanie projektu zakotwienia.
W tym celu prosimy o kontakt pod nr telefonu 77 472 62 65 wew. 204 lub pod adresem mailowym projekty@starfix.eu.

W celu określenia dokładnej grubości istniejących warstw nienośnych na dachu podlegającym renowacji docieplenia niezbędne jest
wykonanie odkrywki istniejącej warstwy nienośnej celem określenia jej grubości.

Konfigurator to narzędzie pozwalające w prosty sposób, teoretycznie dobrać długość i typ łącznika dla podanych parametrów.
Powstały wynik jest wyłącznie rekomendacją i nie zastępuje projektu technicznego oraz wymagań KOT i ETA dla podanych łączników.
        """
    )
    st.markdown(
        "<div style='color:#dd0000;font-weight:bold'>Ważne: Rekomendacje doboru łączników dokonywane przez "
        "niniejszy konfigurator dotyczą wyłącznie łączników marki STARFIX.</div>",
        unsafe_allow_html=True,
    )
    accepted = st.checkbox("Akceptuję warunki korzystania")
    if st.button("Przejdź dalej", disabled=not accepted, use_container_width=True):
        dispatch(AcceptDisclaimer())
        st.rerun()

# 2) Email
elif not state.email_submitted:
    st.subheader("Wprowadź email")
    st.caption("Prześlemy wyniki konfiguracji na Twój adres.")
    with st.form("email_form"):
        address = st.text_input("Adres Email", value=state.email)
        submitted = st.form_submit_button("Kontynuuj", use_container_width=True)
    if submitted:
        dispatch(SubmitEmail(address))
        st.rerun()
    error_text(state, "email")

# 3) Wizard steps
else:
    st.markdown(stepper_html(state.step), unsafe_allow_html=True)

    if state.step == 0:
        st.subheader("Wybierz rodzaj dachu")
        values = [v for v, _ in ROOF_TYPES]
        labels = dict(ROOF_TYPES)
        seed("roof_type", state.roof_type.value if state.roof_type else values[0])
        st.selectbox("Rodzaj dachu", values, format_func=labels.get, key="roof_type", on_change=on_roof_type)
        error_text(state, "roof_type")
        if st.button("Dalej ➜"):
            dispatch(AdvanceStep())
            st.rerun()

    elif state.step == 1:
        st.subheader("Grubość nowej izolacji")
        seed("new_thickness", state.new_thickness)
        st.slider(
            "Grubość [mm]",
            min_value=0,
            max_value=MAX_NEW_THICKNESS,
            step=NEW_THICKNESS_STEP,
            key="new_thickness",
            on_change=on_new_thickness,
        )
        st.markdown(f"<h2 style='text-align:center'>{state.new_thickness} mm</h2>", unsafe_allow_html=True)
        error_text(state, "new_thickness")
        col1, col2 = st.columns(2)
        with col1:
            if st.button("⬅ Wstecz"):
                dispatch(GoBack())
                st.rerun()
        with col2:
            if st.button("Dalej ➜"):
                dispatch(AdvanceStep())
                st.rerun()

    elif state.step == 2:
        if state.roof_type is RoofType.METAL:
            st.info("Dla dachu stalowego nie uwzględniamy starych warstw.")
        else:
            st.subheader("Stare warstwy (ocieplenie / papa)")
            seed("has_old_insulation", state.has_old_insulation)
            st.toggle("Stare warstwy na dachu", key="has_old_insulation", on_change=on_old_insulation)
            st.caption("TAK (Wybierz grubość)" if state.has_old_insulation else "NIE")
            if state.has_old_insulation:
                seed("old_thickness", state.old_thickness)
                st.slider(
                    "Grubość starych warstw [mm]",
                    min_value=0,
                    max_value=MAX_OLD_THICKNESS,
                    step=OLD_THICKNESS_STEP,
                    key="old_thickness",
                    on_change=on_old_thickness,
                )
        col1, col2 = st.columns(2)
        with col1:
            if st.button("⬅ Wstecz"):
                dispatch(GoBack())
                st.rerun()
        with col2:
            if st.button("Oblicz ➜"):
                run_calculation()
                st.rerun()

    else:
        inp = state.to_input()
        st.table(summary_frame(inp))

        if state.recommendations:
            st.markdown("<h3 style='text-align:center'>Twoja konfiguracja</h3>", unsafe_allow_html=True)
            for rec in state.recommendations:
                st.markdown(
                    f"<div class='result-card'><div class='result-tube'>{rec.tube_name}</div>"
                    f"<div class='result-screw'>+ {rec.screw_name}</div></div>",
                    unsafe_allow_html=True,
                )
            if load_smtp_config():
                st.success(f"Wysłano na: {escape_markdown(state.email)}")
            else:
                st.caption("Wysyłka email jest wyłączona.")

            body_html = compose_email_body(
                template_params(state.email, inp, state.recommendations[0]),
                VARIANT.template,
            )
            st.download_button(
                label="⬇️ Pobierz / Drukuj (HTML)",
                data=body_html,
                file_name="LDTK_konfiguracja.html",
                mime="text/html",
                use_container_width=True,
            )
        else:
            st.error("Brak zestawu dla podanych parametrów.")

        pending = st.session_state.pop("pending_stats", None)
        if pending is not None:
            notify_all(pending, [ParentWindowStatsReporter()])

        col1, col2 = st.columns(2)
        with col1:
            if st.button("⬅ Wstecz"):
                dispatch(GoBack())
                st.rerun()
        with col2:
            if st.button("Nowa konfiguracja"):
                for key in FORM_KEYS:
                    st.session_state.pop(key, None)
                dispatch(Reset())
                st.rerun()

    with st.expander("Tabele doboru"):
        st.markdown("**Dach betonowy**")
        st.dataframe(table_frame(CONCRETE_TABLE), hide_index=True)
        st.dataframe(table_frame(WDB_63), hide_index=True)
        st.markdown("**Dach stalowy**")
        st.dataframe(table_frame(METAL_TABLE), hide_index=True)
        st.dataframe(table_frame(WDS_48), hide_index=True)

st.markdown("---")
seed("dark_mode", state.theme_mode == "dark")
st.toggle("Tryb Ciemny", key="dark_mode", on_change=on_dark_mode)
