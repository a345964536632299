#!/usr/bin/env python3
"""
HTTP conversion service.

    POST /convert            multipart "file" (.html/.htm) or form field "html"
    GET  /status/<job_id>    {"status", "log", "error", "ready"}
    GET  /download/<job_id>  the generated .pptx

Run with ``python -m slidewright.web``.
"""

import logging
import tempfile
import threading
import uuid
from datetime import datetime
from pathlib import Path

from flask import Flask, jsonify, request, send_file
from werkzeug.utils import secure_filename

from .html_layout import HtmlOptions, from_html

logger = logging.getLogger("slidewright.web")

ALLOWED_EXT = {".html", ".htm"}
MAX_CONTENT_LENGTH = 50 * 1024 * 1024  # 50 MB

app = Flask(__name__)
app.config["MAX_CONTENT_LENGTH"] = MAX_CONTENT_LENGTH
app.config["RUN_JOBS_INLINE"] = False

JOBS: dict[str, dict] = {}
JOBS_LOCK = threading.Lock()


def _append_log(job_id: str, message: str) -> None:
    with JOBS_LOCK:
        if job_id in JOBS:
            JOBS[job_id]["log"].append(message)


def _set_job_state(job_id: str, **kwargs) -> None:
    with JOBS_LOCK:
        if job_id in JOBS:
            JOBS[job_id].update(kwargs)


def _options_from_form(form) -> HtmlOptions:
    return HtmlOptions(
        title=form.get("title", ""),
        slide_background=form.get("background", ""),
        auto_scale=form.get("autoscale", "1") != "0",
        strict_pagination=form.get("pagination", "1") != "0",
    )


def _process_job(job_id: str, filename: str, html: str, options: HtmlOptions) -> None:
    tmp_dir = Path(tempfile.mkdtemp(prefix="slidewright_job_"))
    _set_job_state(job_id, temp_dir=str(tmp_dir))
    log = lambda m: _append_log(job_id, m)

    try:
        src_path = tmp_dir / filename
        src_path.write_text(html, encoding="utf-8")
        log(f"Saved upload: {filename}")

        if not options.title:
            options.title = Path(filename).stem
        pres = from_html(html, options, base_dir=tmp_dir)
        log(f"Laid out {pres.slide_count()} slides.")

        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        out_pptx = tmp_dir / f"{Path(filename).stem}_{stamp}.pptx"
        pres.save(out_pptx)
        _set_job_state(job_id, status="done", output_path=str(out_pptx), output_name=out_pptx.name)
        log("PPTX generated.")
    except Exception as e:
        logger.exception("job %s failed", job_id)
        _set_job_state(job_id, status="error", error=str(e))
        log(f"Error: {e}")


@app.route("/convert", methods=["POST"])
def convert():
    if "file" in request.files:
        f = request.files["file"]
        if f.filename == "":
            return jsonify({"error": "No file selected."}), 400

        filename = secure_filename(f.filename)
        ext = Path(filename).suffix.lower()
        if ext not in ALLOWED_EXT:
            return jsonify({"error": "Only .html and .htm files are supported."}), 400
        html = f.read().decode("utf-8", errors="replace")
    elif request.form.get("html", "").strip():
        filename = "slides.html"
        html = request.form["html"]
    else:
        return jsonify({"error": "Missing file upload."}), 400

    options = _options_from_form(request.form)
    job_id = uuid.uuid4().hex
    with JOBS_LOCK:
        JOBS[job_id] = {
            "status": "running",
            "log": [f"Started job {job_id}"],
            "error": None,
            "output_path": None,
            "output_name": None,
            "temp_dir": None,
        }

    if app.config.get("RUN_JOBS_INLINE"):
        _process_job(job_id, filename, html, options)
    else:
        thread = threading.Thread(target=_process_job, args=(job_id, filename, html, options), daemon=True)
        thread.start()
    return jsonify({"job_id": job_id})


@app.route("/status/<job_id>", methods=["GET"])
def status(job_id: str):
    with JOBS_LOCK:
        job = JOBS.get(job_id)
        if not job:
            return jsonify({"error": "Job not found."}), 404
        return jsonify(
            {
                "status": job["status"],
                "log": "\n".join(job["log"]),
                "error": job["error"],
                "ready": bool(job["output_path"]),
            }
        )


@app.route("/download/<job_id>", methods=["GET"])
def download(job_id: str):
    with JOBS_LOCK:
        job = JOBS.get(job_id)
        if not job:
            return jsonify({"error": "Job not found."}), 404
        output_path = job["output_path"]
        output_name = job["output_name"]

    if not output_path or not output_name:
        return jsonify({"error": "Output not ready."}), 409

    output_file = Path(output_path)
    if not output_file.exists():
        return jsonify({"error": "Output file missing."}), 410

    return send_file(output_file, as_attachment=True, download_name=output_name)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    app.run(host="0.0.0.0", port=8000, debug=True)
