"""
Domain service: guess the language of a code body from its content.

Each candidate language owns an ordered list of regular-expression
indicators. The table order below is part of the contract: on ambiguous
input the earliest language wins.

- first language with 2+ matching indicators
- otherwise the first language with at least one matching indicator
- otherwise "text"

The result is advisory; callers let the user override it.
"""
from __future__ import annotations

import re
from typing import Dict, List, Optional, Pattern, Tuple

TEXT = "text"

_I = re.IGNORECASE
_M = re.MULTILINE


def _compile(*entries: "str | Tuple[str, int]") -> List[Pattern[str]]:
    out: List[Pattern[str]] = []
    for entry in entries:
        if isinstance(entry, tuple):
            out.append(re.compile(entry[0], entry[1]))
        else:
            out.append(re.compile(entry))
    return out


# Call-style indicators (``main\s*\(``, ``import\s*\(``, ``function\s+\w+\s*\(``)
# match a literal open paren. Older tables wrote these as ``$$``, an
# end-of-input anchor that can never match mid-line, so those indicators were
# dead. The change is deliberate and can shift scores for php, java, c and go.
LANGUAGE_PATTERNS: Dict[str, List[Pattern[str]]] = {
    "javascript": _compile(
        r"function\s+\w+",
        r"const\s+\w+\s*=",
        r"=>\s*\{",
        r"console\.log",
        r"import\s+.*from",
        r"export\s+(default\s+)?",
        r"\.map\s*\(",
        r"\.filter\s*\(",
        r"useState|useEffect",
    ),
    "python": _compile(
        r"def\s+\w+",
        r"import\s+\w+",
        r"from\s+\w+\s+import",
        r"print\s*\(",
        r"if\s+__name__\s*==\s*['\"]__main__['\"]",
        r"class\s+\w+:",
        r"elif\s+",
        (r":\s*$", _M),
    ),
    "css": _compile(
        r"\.\w+\s*\{",
        r"@media",
        r"display\s*:",
        r"background\s*:",
        r"margin\s*:",
        r"padding\s*:",
        r"color\s*:",
        r"font-size\s*:",
        r"transform\s*:",
    ),
    "html": _compile(
        (r"<html", _I),
        (r"<div", _I),
        (r"<p>", _I),
        (r"<script", _I),
        (r"<style", _I),
        (r"<head>", _I),
        (r"<body>", _I),
        (r"<img", _I),
        (r"<a\s+href", _I),
    ),
    "json": _compile(
        r"^\s*\{",
        r"\"\w+\"\s*:",
        r"^\s*\[",
        r"\},\s*\{",
        r"\],\s*\"",
        r"null|true|false",
    ),
    "markdown": _compile(
        (r"^#+\s", _M),
        r"\*\*.+\*\*",
        r"\[.+\]\(.+\)",
        (r"^\s*-\s+", _M),
        (r"^\s*\*\s+", _M),
        (r"^\s*\d+\.\s+", _M),
        (r"^>", _M),
        r"``` ",
    ),
    "sql": _compile(
        (r"SELECT\s+", _I),
        (r"FROM\s+", _I),
        (r"WHERE\s+", _I),
        (r"INSERT\s+INTO", _I),
        (r"UPDATE\s+", _I),
        (r"DELETE\s+FROM", _I),
        (r"CREATE\s+TABLE", _I),
        (r"ALTER\s+TABLE", _I),
    ),
    "bash": _compile(
        r"^#!",
        r"sudo\s+",
        r"apt\s+",
        r"cd\s+",
        r"ls\s+",
        r"grep\s+",
        r"chmod\s+",
        r"export\s+\w+=",
        r"\$\w+",
    ),
    "php": _compile(
        r"<\?php",
        r"\$\w+",
        r"echo\s+",
        r"function\s+\w+\s*\(",
        r"class\s+\w+",
        r"->\w+",
        r"::[\w$]+",
    ),
    "java": _compile(
        r"public\s+class",
        r"public\s+static\s+void\s+main",
        r"System\.out\.println",
        r"import\s+java\.",
        r"private\s+\w+\s+\w+",
        r"public\s+\w+\s+\w+\s*\(",
    ),
    "c": _compile(
        r"#include\s*<",
        r"int\s+main\s*\(",
        r"printf\s*\(",
        r"scanf\s*\(",
        r"malloc\s*\(",
        r"free\s*\(",
        r"struct\s+\w+",
    ),
    "cpp": _compile(
        r"#include\s*<",
        r"using\s+namespace\s+std",
        r"cout\s*<<",
        r"cin\s*>>",
        r"std::",
        r"class\s+\w+",
        r"template\s*<",
    ),
    "go": _compile(
        r"package\s+main",
        r"import\s*\(",
        r"func\s+main\s*\(",
        r"fmt\.Print",
        r"var\s+\w+\s+\w+",
        r":=\s*",
        r"go\s+\w+\(",
    ),
    "rust": _compile(
        r"fn\s+main\s*\(",
        r"println!\s*\(",
        r"let\s+mut\s+",
        r"match\s+\w+",
        r"impl\s+\w+",
        r"struct\s+\w+",
        r"use\s+std::",
    ),
    "yaml": _compile(
        (r"^\s*\w+:\s*$", _M),
        (r"^\s*-\s+\w+:", _M),
        r"version:\s*['\"]?\d+",
        r"apiVersion:",
        r"kind:",
        r"metadata:",
    ),
    "xml": _compile(
        r"<\?xml",
        r"</\w+>",
        r"<\w+\s+.*=",
        r"xmlns:",
        r"CDATA",
    ),
    "dockerfile": _compile(
        (r"FROM\s+\w+", _I),
        (r"RUN\s+", _I),
        (r"COPY\s+", _I),
        (r"ADD\s+", _I),
        (r"WORKDIR\s+", _I),
        (r"EXPOSE\s+\d+", _I),
        (r"CMD\s+", _I),
        (r"ENTRYPOINT\s+", _I),
    ),
}

DISPLAY_NAMES: Dict[str, str] = {
    "javascript": "JavaScript",
    "python": "Python",
    "css": "CSS",
    "html": "HTML",
    "json": "JSON",
    "markdown": "Markdown",
    "sql": "SQL",
    "bash": "Bash/Shell",
    "php": "PHP",
    "java": "Java",
    "c": "C",
    "cpp": "C++",
    "go": "Go",
    "rust": "Rust",
    "yaml": "YAML",
    "xml": "XML",
    "dockerfile": "Dockerfile",
    "text": "Plain Text",
}


class LanguageDetector:
    """
    Domain-level language detector.
    Pure pattern scoring over the code body, independent of infrastructure.
    """

    def __init__(self, patterns: Optional[Dict[str, List[Pattern[str]]]] = None) -> None:
        self._patterns = patterns if patterns is not None else LANGUAGE_PATTERNS

    def score(self, code: Optional[str]) -> Dict[str, int]:
        """Number of matching indicators per language, in table order."""
        text = code or ""
        return {lang: sum(1 for rx in regexes if rx.search(text)) for lang, regexes in self._patterns.items()}

    def detect(self, code: Optional[str]) -> str:
        text = code or ""
        if not text.strip():
            return TEXT
        scores = self.score(text)
        for lang, count in scores.items():
            if count >= 2:
                return lang
        for lang, count in scores.items():
            if count >= 1:
                return lang
        return TEXT


_default_detector = LanguageDetector()


def detect_language(code: Optional[str]) -> str:
    return _default_detector.detect(code)


def language_display_name(lang: Optional[str]) -> str:
    key = (lang or "").strip()
    if not key:
        return DISPLAY_NAMES[TEXT]
    return DISPLAY_NAMES.get(key, key[:1].upper() + key[1:])
