# -----------------------------------------------------------------------------
# Streamlit Frontend for the Algorithm Trace Visualizer
# Purpose:
#   Minimal UI to (1) browse the reference algorithms, (2) detect the algorithm
#   family of pasted code, and (3) request a synthetic trace and step through
#   it frame by frame with an SVG rendering of each step.
# -----------------------------------------------------------------------------

import os, time, requests, streamlit as st
from dotenv import load_dotenv

from algotrace.playback import BACKWARD, FORWARD, StepCursor
from algotrace.render import render_step
from algotrace.types import TraceStep

# Load .env to pick API_URL at runtime for local/remote backends
load_dotenv()
API_URL = os.getenv("API_URL", "http://127.0.0.1:8000")
PLAY_INTERVAL = float(os.getenv("PLAY_INTERVAL", "1.0"))   # seconds per frame while playing
LANGUAGES = ["javascript", "python", "java", "cpp"]

SAMPLE_CODE = """function quickSort(arr) {
  if (arr.length <= 1) return arr;
  const pivot = arr[Math.floor(arr.length / 2)];
  const left = arr.filter(x => x < pivot);
  const right = arr.filter(x => x > pivot);
  return [...quickSort(left), pivot, ...quickSort(right)];
}
quickSort([19, 7, 15, 12, 16, 18, 4, 11, 13]);
"""

# Page setup and header
st.set_page_config(page_title="Algorithm Trace Visualizer", layout="centered")
st.session_state.setdefault("code", SAMPLE_CODE)
st.title("Algorithm Trace Visualizer")

# ---------------- Sidebar: Language + Reference Algorithms --------------------
with st.sidebar:
    language = st.selectbox("Language", LANGUAGES)
    st.subheader("Reference Algorithms")
    if st.checkbox("Show algorithms"):
        r = requests.get(f"{API_URL}/api/algorithms")
        if r.status_code == 200:
            items = r.json()
            st.caption(f"{len(items)} algorithms")
            rows = [{
                "category": it["category"], "name": it["name"],
                "time": it["timeComplexity"], "space": it["spaceComplexity"],
            } for it in items]
            st.dataframe(rows, use_container_width=True, height=300)
            pick = st.selectbox("Load implementation", ["-"] + [it["name"] for it in items])
            chosen = next((it for it in items if it["name"] == pick), None)
            if chosen:
                st.caption(chosen["description"])
                impl = chosen["implementations"].get(language)
                if impl is None:
                    st.warning(f"No {language} implementation")
                elif st.button("Load into editor"):
                    # Runs before the form below creates the text area
                    st.session_state["code"] = impl
        else:
            st.error(f"Algorithms error: {r.text}")

# ---------------- Main Form: Detect + Visualize -------------------------------
with st.form("codeform"):
    code = st.text_area("Paste your code", height=220, key="code")
    col1, col2 = st.columns(2)
    detect = col1.form_submit_button("Detect")
    visualize = col2.form_submit_button("Visualize")

payload = {"code": code, "language": language}

if detect and code.strip():
    with st.spinner("Classifying..."):
        r = requests.post(f"{API_URL}/api/algorithm/detect", json=payload)
    if r.status_code != 200:
        st.error(f"Detect error: {r.text}")
    else:
        res = r.json()
        st.info(f"{res['algorithmType']} (confidence {res['confidence']:.0%}): {res['details']}")
        if res.get("matches"):
            with st.expander("Matches"):
                st.write("\n".join("• " + m for m in res["matches"]))

if visualize and code.strip():
    with st.spinner("Generating trace..."):
        r = requests.post(f"{API_URL}/api/execute", json=payload)
    if r.status_code != 200:
        st.error(f"Execute error: {r.text}")
    else:
        res = r.json()
        st.session_state["result"] = res
        st.session_state["cursor"] = StepCursor([TraceStep.from_dict(s) for s in res["steps"]])

# ---------------- Playback -----------------------------------------------------
cursor = st.session_state.get("cursor")
result = st.session_state.get("result")

if cursor is not None and result is not None:
    st.subheader(f"Trace: {result['algorithmType']}")
    if len(cursor) == 0:
        st.warning("Trace produced no steps.")
        st.stop()

    back, play, fwd, reset = st.columns(4)
    if back.button("◀ Back"):
        cursor.step(BACKWARD)
    if play.button("⏸ Pause" if cursor.playing else "▶ Play"):
        cursor.toggle_play()
    if fwd.button("Forward ▶"):
        cursor.step(FORWARD)
    if reset.button("⟲ Reset"):
        cursor.reset()

    st.progress(cursor.progress, text=f"Step {cursor.index + 1} of {len(cursor)}")
    step = cursor.current
    st.write(f"**{step.action.value}**: {step.description}")
    st.markdown(render_step(step), unsafe_allow_html=True)
    st.code(step.line_content or "", language=language)
    with st.expander("Variables"):
        st.json(step.variables)

    summary = result["complexityAnalysis"]
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Time", summary["timeComplexity"])
    c2.metric("Space", summary["spaceComplexity"])
    c3.metric("Operations", summary["operations"])
    c4.metric("Exec (ms)", f"{result['executionTime']:.1f}")
    with st.expander("Final state"):
        st.json(result["finalState"])

    if cursor.playing:
        time.sleep(PLAY_INTERVAL)
        cursor.tick()
        st.rerun()
