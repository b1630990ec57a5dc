"""Optional AI enrichment through the Anthropic API."""

import json
import logging
import re
from typing import Dict, List, Optional, Sequence

import anthropic

from .models import DirectoryAnalysis, FileAnalysis, ParsedFile

logger = logging.getLogger(__name__)


class EnrichmentError(Exception):
    """Raised when the AI service cannot produce a usable answer."""


class ClaudeEnricher:
    """Asks Claude for descriptions; every call has a non-AI fallback upstream."""

    def __init__(
        self,
        api_key: Optional[str],
        smart_model: str = "claude-3-5-haiku-latest",
        deep_model: str = "claude-sonnet-4-20250514",
        timeout: float = 30.0,
    ):
        self.smart_model = smart_model
        self.deep_model = deep_model
        self.client: Optional[anthropic.Anthropic] = None
        if api_key:
            self.client = anthropic.Anthropic(api_key=api_key, timeout=timeout, max_retries=1)

    def is_available(self) -> bool:
        return self.client is not None

    def _ask(self, prompt: str, model: str, max_tokens: int) -> str:
        if self.client is None:
            raise EnrichmentError("Anthropic API key not configured")
        try:
            response = self.client.messages.create(
                model=model,
                max_tokens=max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as e:
            raise EnrichmentError(f"Claude request failed: {e}") from e
        text = "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        ).strip()
        if not text:
            raise EnrichmentError("Claude returned an empty response")
        return text

    def describe_file(self, path: str, content: str, parsed: ParsedFile) -> str:
        """Return a one-sentence description of a source file."""
        snippet = "\n".join(content.splitlines()[:30])
        prompt = f"""Analyze this code file and provide a one-sentence description of its purpose:

File: {path}
Functions: {', '.join(f.name for f in parsed.functions)}
Classes: {', '.join(c.name for c in parsed.classes)}
Imports: {', '.join(i.source for i in parsed.imports[:5])}

Code snippet (first 30 lines):
{snippet}

Provide only a single sentence describing what this file does."""
        return self._ask(prompt, self.smart_model, 100).splitlines()[0].strip()

    def analyze_directory(
        self,
        path: str,
        files: Sequence[FileAnalysis],
        parsed_files: Dict[str, ParsedFile],
        depth: str,
    ) -> Dict[str, object]:
        """Return purpose, architecture and improvements for a directory."""
        blocks = []
        for info in files[:10]:
            block = f"File: {info.path}\nType: {info.description}"
            parsed = parsed_files.get(info.path)
            if parsed:
                block += (
                    f"\nExports: {', '.join(e.name for e in parsed.exports)}"
                    f"\nImports: {', '.join(i.source for i in parsed.imports)}"
                )
            blocks.append(block)

        prompt = f"""Analyze this directory structure and provide insights:

Directory: {path}

Files:
{chr(10).join(blocks)}

Please provide:
1. A concise purpose statement (1 sentence)
2. Architecture insights (2-3 sentences about patterns, structure, and design)
3. 3-5 specific improvement suggestions based on the code structure

Format your response as JSON with keys: purpose, architecture, improvements (array)"""

        model = self.deep_model if depth == "deep" else self.smart_model
        data = _load_json(self._ask(prompt, model, 1000))
        if not isinstance(data, dict):
            raise EnrichmentError("Expected a JSON object")
        improvements = data.get("improvements") or []
        return {
            "purpose": str(data.get("purpose") or ""),
            "architecture": str(data.get("architecture") or ""),
            "improvements": [str(i) for i in improvements] if isinstance(improvements, list) else [],
        }

    def suggest_improvements(self, analysis: DirectoryAnalysis, depth: str) -> List[str]:
        """Return up to five actionable suggestions for a directory."""
        prompt = f"""Based on this codebase analysis, suggest 3-5 specific, actionable improvements:

Directory: {analysis.path}
Architecture: {analysis.architecture}
Key files: {', '.join(f.path for f in analysis.key_files[:5])}
Dependencies: {', '.join(d.name for d in analysis.dependencies[:10])}

Consider:
- Code organization and architecture
- Missing tests or documentation
- Potential refactoring opportunities
- Security or performance concerns

Provide specific, actionable suggestions as a JSON array of strings."""

        model = self.deep_model if depth == "deep" else self.smart_model
        text = self._ask(prompt, model, 500)
        try:
            data = _load_json(text)
        except EnrichmentError:
            data = [
                re.sub(r"^[\d\-*]\.?\s+", "", line.strip())
                for line in text.splitlines()
                if re.match(r"^[\d\-*]\.?\s", line.strip())
            ]
        if not isinstance(data, list):
            raise EnrichmentError("Expected a JSON array")
        return [str(item) for item in data if str(item).strip()][:5]


def _load_json(text: str) -> object:
    """Parse a JSON reply, tolerating a surrounding markdown code fence."""
    fenced = re.search(r"```(?:json)?\s*(.*?)```", text, re.DOTALL)
    if fenced:
        text = fenced.group(1)
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise EnrichmentError(f"Claude reply was not valid JSON: {e}") from e
