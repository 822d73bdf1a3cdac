"""
Network Graph Scheduler
=======================
Critical Path Method over an activity-on-arc network. Activities are arcs
between numbered events; the app computes early/late times, total and free
float for every activity and traces one critical path from event 1.

Run with:  streamlit run network_scheduler.py
"""

import streamlit as st
import matplotlib.pyplot as plt

from netgraph.engine import NetworkGraph
from netgraph.loader import SAMPLE_NETWORK, load_text
from netgraph.ui_components import build_report_html, read_uploaded_network
from netgraph.ui_styles import DEFAULT_THEME, THEMES, get_active_theme, get_theme_css
from netgraph.visualizations import create_gantt_chart, create_network_diagram, create_plotly_gantt


def _replace_graph(graph: NetworkGraph) -> None:
    st.session_state.graph = graph
    st.session_state.calculated = False


def main():
    """Main Streamlit application."""

    st.set_page_config(
        page_title="Network Graph Scheduler",
        page_icon="📈",
        layout="wide",
        initial_sidebar_state="expanded"
    )

    # Initialize session state
    if 'graph' not in st.session_state:
        st.session_state.graph = NetworkGraph()
    if 'calculated' not in st.session_state:
        st.session_state.calculated = False
    if 'theme_name' not in st.session_state:
        st.session_state.theme_name = DEFAULT_THEME
    graph = st.session_state.graph
    theme = get_active_theme(st.session_state.theme_name)

    st.markdown(get_theme_css(theme), unsafe_allow_html=True)
    st.title("📈 Network Graph Scheduler")
    st.markdown("**Critical Path Method - Activity on Arc.** Events are numbered nodes, activities are arcs.")

    with st.sidebar:
        st.header("Add Activity")

        with st.form("add_activity_form"):
            predecessor = st.number_input("Start event (i)", min_value=1, value=1, step=1)
            event = st.number_input("End event (j)", min_value=1, value=2, step=1)
            duration = st.number_input("Duration t(i,j)", min_value=0, value=1, step=1)
            submitted = st.form_submit_button("Add Activity", type="primary", use_container_width=True)

            if submitted:
                graph.resize(max(int(predecessor), int(event)))
                success, message = graph.add_activity(int(predecessor), int(event), int(duration))
                if success:
                    st.session_state.calculated = False
                    st.success(message)
                    st.rerun()
                else:
                    st.error(message)

        st.divider()

        st.header("Load Network")
        skip_comments = st.checkbox("Treat '#' lines as comments", value=True)
        uploaded = st.file_uploader("Text file: event predecessor duration", type=["txt", "dat"])
        if uploaded is not None and st.button("Load File", use_container_width=True):
            loaded, message = read_uploaded_network(uploaded.getvalue(), skip_comments=skip_comments)
            if loaded is None:
                st.error(message)
            else:
                _replace_graph(loaded)
                st.success(message)
                st.rerun()

        if st.button("Load Sample Network", use_container_width=True):
            loaded, message = load_text(SAMPLE_NETWORK)
            _replace_graph(loaded)
            st.success(message)
            st.rerun()

        if st.button("Clear All Activities", use_container_width=True, type="secondary"):
            _replace_graph(NetworkGraph())
            st.rerun()

        st.divider()
        st.selectbox("Theme", options=list(THEMES.keys()), key="theme_name")

        st.header("File Format")
        st.markdown("""
        One activity per line: `event predecessor duration`

        - predecessor `0` means the activity starts at event 1
        - blank lines and `#` comments are skipped
        - the highest event id is the terminal event
        """)

    col1, col2 = st.columns([2, 1])

    with col1:
        st.header("Activities")
        if graph.activities:
            st.dataframe(graph.get_activities_dataframe(), use_container_width=True, hide_index=True)
        else:
            st.info("No activities added yet. Use the sidebar to add activities or load a file.")

    with col2:
        st.header("Actions")

        if st.button("🔢 Calculate Critical Path & Floats",
                     use_container_width=True, type="primary",
                     disabled=len(graph.activities) == 0):
            success, message = graph.calculate_all()
            st.session_state.calculated = success
            if success:
                st.success(message)
            else:
                st.error(message)

        st.divider()

        if st.session_state.calculated:
            st.metric("Critical Path Length", graph.project_duration)
            st.metric("Critical Activities", len(graph.critical_activities()))

    if st.session_state.calculated and graph.activities:
        st.divider()
        st.header("📊 Calculation Results")

        results_df = graph.get_results_dataframe()

        def highlight_critical(row):
            if row['Critical'] == 'Yes':
                return [f"background-color: {theme['critical_soft']}"] * len(row)
            return [''] * len(row)

        st.dataframe(results_df.style.apply(highlight_critical, axis=1), use_container_width=True, hide_index=True)

        st.subheader("Critical Path")
        path = graph.critical_path
        st.markdown(f'<span class="ng-path">{graph.format_path().replace("->", "→")}</span>', unsafe_allow_html=True)
        if not path.complete:
            st.warning(
                f"The zero-float chain stops at event {path.reached_event} "
                f"and does not reach terminal event {graph.sink_event}."
            )

        graph_data = graph.to_dict()
        tab1, tab2, tab3, tab4 = st.tabs(["🕸 Network Diagram", "📅 Gantt Chart", "🔘 Events", "📝 Calculation Details"])

        with tab1:
            fig = create_network_diagram(graph_data, theme)
            st.pyplot(fig)
            st.caption("Event labels show id and early/late time. Thick arrows are critical activities.")

        with tab2:
            interactive = st.toggle("Interactive", value=False)
            if interactive:
                st.plotly_chart(create_plotly_gantt(graph_data, theme), use_container_width=True)
            else:
                st.pyplot(create_gantt_chart(graph_data, theme))
            st.caption("Grey extensions show total float of non-critical activities.")

        with tab3:
            st.dataframe(graph.get_events_dataframe(), use_container_width=True, hide_index=True)

        with tab4:
            st.text_area("Calculation Steps", value="\n".join(graph.calculation_log), height=500, disabled=True)

        report = build_report_html(graph, theme)
        st.download_button("⬇ Download HTML Report", data=report,
                           file_name="network_schedule.html", mime="text/html")
        plt.close("all")


if __name__ == "__main__":
    main()
