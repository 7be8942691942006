import streamlit as st

from family_auth import identity_from_user
from family_config import load_settings
from family_logger import logger, set_log_level
from family_relation import RelationParseError, parse_relation_csv, relation_entities, relation_to_frame
from family_render import ExportError, build_graph, export_dot, export_png, graph_frames
from family_report import ReportError, generate_report
from family_storage import FamilyDataStore, PersistenceError

st.set_page_config(page_title="Family Hierarchy", layout="wide")

# --------------------------
# Session State & Settings
# --------------------------
try:
    secrets = st.secrets.to_dict()
except FileNotFoundError:  # no secrets.toml
    secrets = {}
settings = load_settings(secrets)
set_log_level(settings.log_level)


def _init_state():
    if "family_tree" not in st.session_state: st.session_state.family_tree = {}  # Relation
    if "report" not in st.session_state: st.session_state.report = None  # HierarchyGraph
    if "error" not in st.session_state: st.session_state.error = None  # ReportError
    if "person_name" not in st.session_state: st.session_state.person_name = ""
    if "upward_levels" not in st.session_state: st.session_state.upward_levels = settings.default_upward_levels
    if "downward_levels" not in st.session_state: st.session_state.downward_levels = settings.default_downward_levels
    if "api_url" not in st.session_state: st.session_state.api_url = settings.graphviz_api_url
    if "profile_saved" not in st.session_state: st.session_state.profile_saved = False

_init_state()
store = FamilyDataStore(settings.family_data_url)
identity = identity_from_user(st.user)


def clear_report():
    st.session_state.person_name = ""
    st.session_state.upward_levels = settings.default_upward_levels
    st.session_state.downward_levels = settings.default_downward_levels
    st.session_state.report = None
    st.session_state.error = None


def field_error(field: str) -> None:
    err = st.session_state.error
    if err is not None and err.field == field:
        st.caption(f":red[{err.message}]")


# --------------------------
# Sidebar Controls
# --------------------------
with st.sidebar:
    st.header("Settings")
    st.text_input("Graphviz API URL", key="api_url", placeholder="https://<your-renderer>")
    st.caption("Tip: set GRAPHVIZ_API_URL in Streamlit Secrets for production. "
               "Without it, PNG export is drawn locally.")
    if st.session_state.family_tree:
        st.subheader("Known names")
        st.caption(", ".join(relation_entities(st.session_state.family_tree)))

st.title(f"🧬 {settings.title}")

# --------------------------
# Sign In / Out
# --------------------------
if identity is None:
    st.subheader("Please Sign In")
    if "auth" in secrets:
        st.button("Continue with Google", on_click=st.login)
    else:
        st.caption("Sign-in is not configured ([auth] section missing from Streamlit Secrets).")
    st.info("No report generated yet. Sign in, upload your family data and enter your name.")
    st.stop()

st.subheader(f"Welcome, {identity.display_name or identity.email}!")
st.button("Sign Out", on_click=st.logout)

if not st.session_state.profile_saved:
    try:
        store.save_user(identity)
        st.session_state.profile_saved = True
    except PersistenceError as e:
        logger.warning(f"Profile not stored: {e}")
        st.warning(f"Failed to save your profile to storage: {e}")

# --------------------------
# CSV Upload
# --------------------------
st.subheader("📥 Upload Family Data (CSV)")
st.markdown(
    'The CSV file should have two columns: "Parent" and "Children". The first row '
    "should be the header row. Subsequent rows list a parent and their children, "
    "separated by commas. For example:"
)
st.code("Parent,Children\nParshottambhai,Batukbhai,Meghajibhai,Velajibhai,Premjibhai\n"
        "Jagdishbhai,Meet,Kruti\nNiteenbhai,Het,Heli", language="text")

csv_file = st.file_uploader("Family CSV", type=["csv"], key="family_csv")
if st.button("Upload", disabled=csv_file is None):
    raw = csv_file.getvalue()
    try:
        tree = parse_relation_csv(raw)
    except RelationParseError as e:
        st.error(str(e))
    else:
        st.session_state.family_tree = tree
        st.session_state.report = None
        st.success(f"Family data loaded: {len(tree)} parents.")
        try:
            doc_id = store.save_upload(raw.decode("utf-8-sig"), identity.uid)
            st.caption(f"Stored as {doc_id}.")
        except PersistenceError as e:
            # the parsed data stays usable for this session
            st.warning(f"Failed to upload data to storage: {e}")

if st.session_state.family_tree:
    with st.expander("Input Data Preview", expanded=False):
        st.dataframe(relation_to_frame(st.session_state.family_tree), use_container_width=True)

# --------------------------
# Generate Report
# --------------------------
st.subheader("🗺️ Generate Report")
st.text_input("Your Name", key="person_name")
field_error("name")
c1, c2 = st.columns(2)
with c1:
    st.number_input("Upward Levels", min_value=0, step=1, key="upward_levels")
    field_error("upward")
with c2:
    st.number_input("Downward Levels", min_value=0, step=1, key="downward_levels")
    field_error("downward")

b1, b2 = st.columns(2)
with b1:
    if st.button("Generate Report", type="primary"):
        st.session_state.report = None
        st.session_state.error = None
        try:
            st.session_state.report = generate_report(
                st.session_state.person_name,
                st.session_state.upward_levels,
                st.session_state.downward_levels,
                st.session_state.family_tree,
                identity,
            )
        except ReportError as e:
            st.session_state.error = e
        st.rerun()
with b2:
    st.button("Clear", on_click=clear_report)

# --------------------------
# Diagram & Exports
# --------------------------
report = st.session_state.report
if report is None:
    st.info("No report generated yet. Enter your name and levels to see the family hierarchy.")
    st.stop()

st.graphviz_chart(build_graph(report))

with st.expander("Nodes & Edges", expanded=False):
    nodes_df, edges_df = graph_frames(report)
    n1, n2 = st.columns(2)
    n1.dataframe(nodes_df, use_container_width=True)
    n2.dataframe(edges_df, use_container_width=True)

st.subheader("📤 Export")
ec1, ec2, ec3 = st.columns(3)
with ec1:
    if st.button("Download Report"):
        try:
            data = export_png(report, st.session_state.api_url.strip())
            st.download_button("Download PNG", data=data, file_name="family_tree_report.png", mime="image/png")
        except ExportError as e:
            st.error(str(e))
with ec2:
    try:
        st.download_button("Download DOT", data=export_dot(report, settings.title), file_name="family_tree_report.dot",
                           mime="text/vnd.graphviz")
    except ExportError as e:
        st.error(str(e))
with ec3:
    nodes_df, edges_df = graph_frames(report)
    st.download_button("Nodes CSV", nodes_df.to_csv(index=False).encode("utf-8"),
                       file_name="nodes.csv", mime="text/csv")
    st.download_button("Edges CSV", edges_df.to_csv(index=False).encode("utf-8"),
                       file_name="edges.csv", mime="text/csv")
