"""Request pipeline: classify → compose → generate → extract → enhance → persist."""

import asyncio
import logging

from agents.code_enhancer import CodeEnhancer
from agents.prompt_composer import PromptComposer
from core.state import GenerationResult
from core.store import FALLBACK_PATH
from manager.classifier import detect_iteration
from utils.file_types import get_file_type
from utils.llm import call_llm, parse_files

logger = logging.getLogger(__name__)


class GenerationPipeline:
    """Runs one chat message through the iteration-aware generation flow.

    Stateless between calls: every request classifies against a fresh
    snapshot of the project's files.
    """

    def __init__(self, store, composer=None, generate=None, enhancer_options=None):
        self.store = store
        self.composer = composer or PromptComposer()
        self.generate = generate or call_llm
        self.enhancer = CodeEnhancer(enhancer_options)

    async def classify(self, user_message, project_id):
        return await detect_iteration(user_message, project_id, self.store)

    async def prepare(self, user_message, project_id):
        """Classify the message and build the {system_prompt, user_message} payload."""
        context = await self.classify(user_message, project_id)
        logger.info(
            "Project %s: iteration=%s scope=%s files=%d",
            project_id, context.is_iteration, context.change_scope, len(context.existing_files),
        )
        return self.composer.compose(user_message, context)

    async def run(self, user_message, project_id):
        """Prepare, call the generation service, then persist the output."""
        payload = await self.prepare(user_message, project_id)
        # The client is blocking; keep it off the event loop.
        response = await asyncio.to_thread(self.generate, payload.system_prompt, payload.user_message)
        return await self.apply(project_id, payload, user_message, response)

    def enhance_files(self, files):
        """Run the enhancer over each generated file by type."""
        enhanced = []
        applied = []
        for path, content in files:
            file_type = get_file_type(path)
            if file_type == "html":
                result = self.enhancer.enhance_code(html=content)
                content = result.html
            elif file_type == "css":
                result = self.enhancer.enhance_code(css=content)
                content = result.css
            elif file_type == "js":
                result = self.enhancer.enhance_code(js=content)
                content = result.js
            else:
                enhanced.append((path, content))
                continue
            applied.extend(f"{path}: {e}" for e in result.enhancements)
            enhanced.append((path, content))
        return enhanced, applied

    async def apply(self, project_id, payload, user_message, response):
        """Extract generated files, enhance them and merge them into the project.

        Iterations keep every existing file the response did not re-emit;
        new projects replace the file set. A response without file headers is
        stored whole as index.html.
        """
        result = GenerationResult(payload=payload, response=response)
        if not project_id or not response.strip():
            return result

        generated = parse_files(response)
        if not generated:
            generated = [(FALLBACK_PATH, response.strip())]
        generated, result.enhancements = self.enhance_files(generated)

        merged = generated
        if payload.context.is_iteration:
            # Existing files keep their position; new files go last.
            updates = dict(generated)
            merged = [(f.path, updates.pop(f.path, f.content)) for f in payload.context.existing_files]
            merged.extend((path, content) for path, content in updates.items())

        await self.store.save_project_files(project_id, merged)
        code = next((content for path, content in merged if path == FALLBACK_PATH), "")
        await self.store.add_version(project_id, user_message, code)

        result.written_files = [path for path, _ in generated]
        logger.info("Project %s: wrote %d file(s), kept %d", project_id,
                    len(generated), len(merged) - len(generated))
        return result
