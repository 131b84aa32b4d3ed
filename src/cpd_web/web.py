from __future__ import annotations
import argparse, sys
from flask import Flask, request, jsonify, Response
from cpd import config as CFG
from cpd.__main__ import _extract_offset_flags, _parse_pattern_opts
from cpd.config import MatchConfig
from cpd.engine import Engine
from cpd.errors import ConfigError, CorpusReadError

app = Flask(__name__)
_engine: Engine | None = None

# ---------- API ----------
@app.get("/api/duplicates")
def api_duplicates():
    if _engine is None or _engine.corpus is None:
        return jsonify({"ok": False}), 503
    min_count = request.args.get("min_count", 0, type=int)
    descending = request.args.get("descending", "0") in ("1", "true", "yes")
    groups = _engine.find_duplicates(descending=descending)
    return jsonify([g.to_dict() for g in groups if g.count >= min_count])

@app.get("/api/health")
def api_health():
    if _engine is None or _engine.corpus is None:
        return jsonify({"ok": False}), 503
    stats = _engine.stats()
    return jsonify({
        "ok": True,
        "files": stats["files"],
        "lines": stats["lines"],
        "groups": len(_engine.find_duplicates()),
    })
# ---------- UI ----------
@app.get("/")
def home():
    # A tiny page: CSS variables + minimal JS, no external deps.
    html = r"""
<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8" />
<meta name="viewport" content="width=device-width,initial-scale=1" />
<title>Copy Paste Detective</title>
<style>
:root{
  --bg:#0b0f14;
  --panel:#0f141b;
  --ink:#cfd8e3;
  --muted:#8a94a6;
  --accent:#6ee7ff;
  --border:#1c2530;
}
*{box-sizing:border-box}
body{
  margin:0; background:var(--bg); color:var(--ink);
  font:16px/1.45 system-ui,-apple-system,Segoe UI,Roboto,Ubuntu,"Helvetica Neue",Arial;
}
.container{ max-width:980px; margin:24px auto; padding:0 16px; }
.card{
  background:var(--panel); border:1px solid var(--border);
  border-radius:16px; padding:18px; margin-bottom:14px;
}
h1{ font-size:20px; margin:0 0 8px 0; }
.meta{ color:var(--muted); font-size:13px; }
.count{ color:var(--accent); font-weight:600; }
.mono{ font-family: ui-monospace, SFMono-Regular, Menlo, Monaco, Consolas, monospace; white-space:pre }
.small{ color:var(--muted); font-variant-numeric:tabular-nums }
.empty{ padding:24px; text-align:center; color:var(--muted); }
</style>
</head>
<body>
  <div class="container">
    <div class="card">
      <h1>Copy Paste Detective</h1>
      <div class="meta" id="stats">Loading…</div>
    </div>
    <div id="out"></div>
  </div>
<script>
const esc = (s) => String(s).replace(/[&<>"]/g, (c)=>({"&":"&amp;","<":"&lt;",">":"&gt;",'"':"&quot;"}[c]));
async function load(){
  const out = document.querySelector("#out"), stats = document.querySelector("#stats");
  try{
    const resp = await fetch("/api/duplicates?descending=1");
    if(!resp.ok) throw new Error(`HTTP ${resp.status}`);
    const data = await resp.json();
    stats.textContent = `Duplicate windows: ${data.length}`;
    if(data.length === 0){ out.innerHTML = '<div class="card empty">No duplicates.</div>'; return; }
    out.innerHTML = data.map((g)=>`
      <div class="card">
        <div class="count">${g.count} occurrences</div>
        <div class="mono">${g.lines.map((l)=>`<span class="small">[${String(l.occurrences).padStart(4)}]</span> ${esc(l.text)}`).join("\n")}</div>
        <div class="small mono">${g.locations.map((x)=>`${esc(x.path)}(${x.line})`).join("\n")}</div>
      </div>`).join("");
  }catch(e){
    stats.textContent = `Error: ${e.message ?? e}`;
  }
}
load();
</script>
</body>
</html>
"""
    return Response(html, mimetype="text/html")

def main(argv=None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    argv, numbered = _extract_offset_flags(argv)
    ap = argparse.ArgumentParser(prog="cpd-web", description="Serve the duplicate report over HTTP")
    ap.add_argument("patterns", nargs="+", metavar="PATTERN")
    ap.add_argument("-n", "--lines", type=int, default=CFG.WINDOW_SIZE)
    ap.add_argument("-p", "--pattern", action="append", default=[], metavar="OFFSET=REGEX")
    ap.add_argument("-r", "--recursive", action="store_true")
    ap.add_argument("--host", default="127.0.0.1")
    ap.add_argument("--port", type=int, default=8000)
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_intermixed_args(argv)

    try:
        patterns = _parse_pattern_opts(args.pattern)
        patterns.update(numbered)
        cfg = MatchConfig.create(args.lines, patterns)
    except ConfigError as e:
        ap.error(str(e))

    global _engine
    _engine = Engine(cfg)
    try:
        _engine.build(args.patterns, recursive=args.recursive, verbose=args.verbose)
    except CorpusReadError as e:
        _engine.shutdown()
        ap.error(str(e))

    try:
        app.run(host=args.host, port=args.port, debug=args.verbose)
    finally:
        _engine.shutdown()
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
