# core/highlighter.py
"""
Per-line syntax highlighting using Pygments.

The diff engine treats this as a pure function: highlight(line, grammarKey)
returns HTML-safe markup and never raises. Unknown grammars and lexer
failures fall back to HTML-escaped plain text.
"""

import html
import logging
from typing import Dict, Optional

from pygments import highlight as pygmentsHighlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import find_lexer_class_for_filename, get_lexer_by_name
from pygments.util import ClassNotFound

logger: logging.Logger = logging.getLogger(__name__)

PLAIN_TEXT_GRAMMARS = frozenset({"", "text", "plaintext", "plain", "none"})

# Grammar keys used by the host that Pygments knows under another name
GRAMMAR_ALIASES: Dict[str, str] = {
	"py": "python",
	"js": "javascript",
	"ts": "typescript",
	"sh": "bash",
	"shell": "bash",
	"yml": "yaml",
	"docker": "dockerfile",
	"md": "markdown",
}

# Inline styles so the markup renders without an external stylesheet
_FORMATTER: HtmlFormatter = HtmlFormatter(nowrap=True, noclasses=True)

_lexerCache: Dict[str, Optional[Lexer]] = {}


def normaliseGrammar(grammarKey: Optional[str]) -> str:
	key = (grammarKey or "").strip().lower()
	return GRAMMAR_ALIASES.get(key, key)


def getLexer(grammarKey: Optional[str]) -> Optional[Lexer]:
	"""
	Returns a cached Pygments lexer for the grammar, or None when the grammar is
	plain text or unknown. Failed lookups are cached too.
	"""
	key = normaliseGrammar(grammarKey)
	if key in PLAIN_TEXT_GRAMMARS:
		return None
	if key in _lexerCache:
		return _lexerCache[key]
	try:
		# stripnl would drop leading/trailing blank content of the single line
		lexer: Optional[Lexer] = get_lexer_by_name(key, stripnl=False, ensurenl=False)
	except ClassNotFound:
		logger.debug(f"No Pygments lexer for grammar '{key}'. Falling back to escaped text.")
		lexer = None
	_lexerCache[key] = lexer
	return lexer


def escapeText(text: str) -> str:
	return html.escape(text, quote=True)


def highlight(line: str, grammarKey: Optional[str]) -> str:
	"""
	Highlights a single line.

	Args:
		line (str): The raw line, without its terminator.
		grammarKey (Optional[str]): Grammar name (e.g. 'python', 'tsx').

	Returns:
		str: HTML-safe markup. Empty for an empty line.
	"""
	if not line:
		return ""
	lexer = getLexer(grammarKey)
	if lexer is None:
		return escapeText(line)
	try:
		markup: str = pygmentsHighlight(line, lexer, _FORMATTER)
	except Exception as e:
		logger.warning(f"Highlighting failed for grammar '{grammarKey}': {e}. Using escaped text.")
		return escapeText(line)
	return markup.rstrip("\n")


def guessGrammar(filename: Optional[str], fallback: str = "text") -> str:
	"""
	Picks a grammar key for a filename from the lexers Pygments registers.

	Args:
		filename (Optional[str]): File name or path, used only for its extension.
		fallback (str): Grammar returned when nothing matches.

	Returns:
		str: The primary alias of the matching lexer, or fallback.
	"""
	if not filename:
		return fallback
	try:
		lexerClass = find_lexer_class_for_filename(filename)
	except ClassNotFound:
		lexerClass = None
	if lexerClass is None or not lexerClass.aliases:
		return fallback
	return lexerClass.aliases[0]
