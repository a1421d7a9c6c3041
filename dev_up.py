# -----------------------------------------------------------------------------
# dev_up.py: Dev Orchestrator for the Algorithm Trace Visualizer
# Validates the algorithm catalog, boots FastAPI (uvicorn) + Streamlit UI and
# interleaves their logs in one terminal.
# Key details:
#   - Binds API to API_HOST; probes always go through 127.0.0.1 when bound to 0.0.0.0
#   - Both children get src/ on PYTHONPATH (the UI imports algotrace for rendering)
#   - Health probe also checks that the reference algorithms were seeded
# -----------------------------------------------------------------------------

from __future__ import annotations
import atexit
import os
import sys
import time
import socket
import subprocess
from pathlib import Path
from typing import Dict, List, Optional

# ---------------------- CONFIG (base defaults) ----------------------
PROJECT_ROOT = Path(__file__).parent.resolve()
API_APP = "api.main:app"              # uvicorn import path for FastAPI app
API_HOST = "127.0.0.1"
API_PORT = 8000
UI_PORT = 8501
UI_FILE = PROJECT_ROOT / "ui" / "app.py"
SRC_DIR = str(PROJECT_ROOT / "src")

# ---------------------- HELPERS ----------------------
def echo(msg: str): print(f"[dev_up] {msg}", flush=True)
def fail(msg: str, code: int = 1): echo(f"❌ {msg}"); sys.exit(code)

def probe_host(bind_host: str) -> str:
    return "127.0.0.1" if bind_host in ("0.0.0.0", "0") else bind_host

def child_env(**extra: str) -> Dict[str, str]:
    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(p for p in (env.get("PYTHONPATH", ""), SRC_DIR, str(PROJECT_ROOT)) if p)
    env.update(extra)
    return env

def free_port(port: int):
    if sys.platform.startswith("win"):
        out = subprocess.run(f"netstat -ano | findstr :{port}", shell=True, capture_output=True, text=True).stdout
        pids = [line.split()[-1] for line in out.splitlines() if "LISTENING" in line]
        kill = ["taskkill", "/F", "/PID"]
    else:
        out = subprocess.run(["lsof", "-t", f"-i:{port}"], capture_output=True, text=True).stdout
        pids = out.split()
        kill = ["kill", "-9"]
    for pid in pids:
        echo(f"Killing PID {pid} on port {port}")
        subprocess.run(kill + [pid], capture_output=True)

def port_in_use(host: str, port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.settimeout(0.5)
        return s.connect_ex((host, port)) == 0

def load_settings():
    try:
        from dotenv import load_dotenv
    except ImportError:
        fail("python-dotenv missing → pip install -e .")
    if (PROJECT_ROOT / ".env").exists():
        load_dotenv(PROJECT_ROOT / ".env")
        echo("Loaded .env file")
    host = os.getenv("API_HOST", API_HOST)
    port = int(os.getenv("API_PORT", str(API_PORT)))
    # The UI talks to the API through a client-connectable URL
    os.environ.setdefault("API_URL", f"http://{probe_host(host)}:{port}")
    os.environ.setdefault("CATALOG_PATH", str(PROJECT_ROOT / "examples" / "catalog.yaml"))
    return host, port, int(os.getenv("UI_PORT", str(UI_PORT)))

def validate_catalog(path: str):
    if SRC_DIR not in sys.path:
        sys.path.insert(0, SRC_DIR)
    try:
        from algotrace.catalog import Catalog, CatalogError
    except ImportError as e:
        fail(f"algotrace not importable ({e}) → pip install -e .")
    if not Path(path).exists():
        fail(f"Catalog YAML not found: {path}")
    try:
        catalog = Catalog.from_file(path)
    except CatalogError as e:
        fail(f"Catalog validation failed:\n{e}")
    echo(f"✅ Catalog OK: {len(catalog.categories)} categories, {len(catalog.algorithms)} reference algorithms")

def wait_for_api(base_url: str, timeout: float = 60.0) -> bool:
    import requests
    deadline = time.time() + timeout
    while time.time() < deadline:
        try:
            if requests.get(f"{base_url}/health", timeout=2).ok:
                seeded = requests.get(f"{base_url}/api/algorithms", timeout=2).json()
                echo(f"API serving {len(seeded)} reference algorithms")
                return True
        except requests.RequestException:
            pass
        time.sleep(0.4)
    return False

def pump(name: str, proc: Optional[subprocess.Popen], limit: int = 1) -> List[str]:
    lines: List[str] = []
    if proc and proc.stdout:
        for _ in range(limit):
            line = proc.stdout.readline()
            if not line:
                break
            print(f"[{name}] {line}", end="")
            lines.append(line)
    return lines

# ---------------------- STARTERS ----------------------
def start_api(host: str, port: int) -> subprocess.Popen:
    cmd = [sys.executable, "-m", "uvicorn", API_APP, "--host", host, "--port", str(port), "--reload",
           "--reload-dir", SRC_DIR, "--reload-dir", str(PROJECT_ROOT / "api")]
    echo(f"▶ Starting API → {' '.join(cmd)}")
    return subprocess.Popen(cmd, cwd=str(PROJECT_ROOT), env=child_env(),
                            stdout=subprocess.PIPE, stderr=subprocess.STDOUT, text=True)

def start_ui(port: int) -> subprocess.Popen:
    env = child_env(STREAMLIT_SERVER_HEADLESS="true", STREAMLIT_BROWSER_GATHER_USAGE_STATS="false")
    cmd = [sys.executable, "-m", "streamlit", "run", str(UI_FILE),
           "--server.port", str(port), "--server.address", env.get("STREAMLIT_SERVER_ADDRESS", "0.0.0.0")]
    echo(f"▶ Starting UI → {' '.join(cmd)}")
    return subprocess.Popen(cmd, cwd=str(PROJECT_ROOT), env=env,
                            stdout=subprocess.PIPE, stderr=subprocess.STDOUT, text=True)

# ---------------------- MAIN ----------------------
def main():
    echo("🚀 Launching Algorithm Trace Visualizer...")
    host, port, ui_port = load_settings()

    for mod, hint in (("uvicorn", "uvicorn[standard]"), ("streamlit", "streamlit"), ("yaml", "PyYAML")):
        try:
            __import__(mod)
        except ImportError:
            fail(f"{mod} missing → pip install {hint}")

    validate_catalog(os.environ["CATALOG_PATH"])

    probe = probe_host(host)
    for p in (port, ui_port):
        free_port(p)
        if port_in_use(probe, p):
            fail(f"Port {p} still in use after cleanup.")

    procs: Dict[str, Optional[subprocess.Popen]] = {"API": start_api(host, port), "UI": None}

    def cleanup():
        for proc in procs.values():
            if proc and proc.poll() is None:
                proc.terminate()
                try:
                    proc.wait(timeout=2)
                except subprocess.TimeoutExpired:
                    proc.kill()
    atexit.register(cleanup)

    echo("⌛ Waiting for API ...")
    if not wait_for_api(os.environ["API_URL"]):
        echo("Last API logs:")
        pump("API", procs["API"], limit=20)
        fail("API failed to become ready in time.")

    procs["UI"] = start_ui(ui_port)
    deadline = time.time() + 45
    while time.time() < deadline:
        if any("Network URL" in line or "Running on" in line for line in pump("UI", procs["UI"])):
            break
    else:
        echo("⚠️ Streamlit did not confirm in time; check logs above.")

    echo(f"🌐 UI running at: http://localhost:{ui_port}")
    echo(f"📘 API docs: http://localhost:{port}/docs")

    try:
        while all(proc.poll() is None for proc in procs.values()):
            for name, proc in procs.items():
                pump(name, proc)
            time.sleep(0.2)
    except KeyboardInterrupt:
        echo("🛑 Ctrl+C pressed, shutting down...")
    finally:
        cleanup()
        echo("✅ All processes stopped cleanly.")

if __name__ == "__main__":
    main()
