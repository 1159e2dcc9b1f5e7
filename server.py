#!/usr/bin/env python3
"""BuildFlow generation API - Flask adapter around the iteration-aware pipeline."""

import logging
import os

import anthropic
from flask import Flask, jsonify, request

from core.pipeline import GenerationPipeline
from core.store import JsonProjectStore, ProjectStoreError

logger = logging.getLogger(__name__)

app = Flask(__name__)
store = JsonProjectStore()
pipeline = GenerationPipeline(store)


def _context_to_dict(context):
    """Serialize IterationContext to a JSON-safe dict (file contents omitted)."""
    return {
        "is_iteration": context.is_iteration,
        "change_scope": context.change_scope,
        "project_id": context.project_id,
        "existing_files": [
            {"path": f.path, "type": f.type, "size": len(f.content)}
            for f in context.existing_files
        ],
        "previous_prompts": context.previous_prompts,
    }


def _read_message():
    """Return (message, project_id) from the JSON body, or (None, None) if invalid."""
    data = request.get_json(silent=True)
    if not data or not str(data.get("message", "")).strip():
        return None, None
    return str(data["message"]).strip(), data.get("project_id")


@app.route("/api/prepare", methods=["POST"])
async def api_prepare():
    """Dry run: classify the message and return the payload without generating."""
    message, project_id = _read_message()
    if message is None:
        return jsonify({"error": "Missing message"}), 400

    payload = await pipeline.prepare(message, project_id)
    return jsonify({
        "context": _context_to_dict(payload.context),
        "system_prompt": payload.system_prompt,
        "user_message": payload.user_message,
        "dry_run": True,
    })


@app.route("/api/generate", methods=["POST"])
async def api_generate():
    message, project_id = _read_message()
    if message is None:
        return jsonify({"error": "Missing message"}), 400

    try:
        result = await pipeline.run(message, project_id)
    except (RuntimeError, anthropic.APIError) as e:
        # Missing API key, exhausted retries, store write failures.
        logger.error("Generation failed for project %s: %s", project_id, e)
        return jsonify({"error": str(e)}), 502

    return jsonify({
        "context": _context_to_dict(result.payload.context),
        "written_files": result.written_files,
        "enhancements": result.enhancements,
    })


@app.route("/api/projects/<project_id>/files")
async def api_project_files(project_id):
    try:
        snapshot = await store.get_project_files(project_id)
    except ProjectStoreError as e:
        return jsonify({"error": str(e)}), 500
    if snapshot is None:
        return jsonify({"error": "Project not found"}), 404
    return jsonify({
        "project_id": project_id,
        "files": [{"path": f.path, "type": f.type, "content": f.content} for f in snapshot.files],
        "previous_prompts": snapshot.previous_prompts,
    })


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    port = int(os.environ.get("PORT", 5001))
    print(f"BuildFlow API running at http://localhost:{port}")
    app.run(debug=False, port=port)
