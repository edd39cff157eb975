"""
Interactive inspector session.

Owns the state a view needs between user actions: the raw JSON and token
text, the quoting preference, the parsed value with its expansion state, and
the active tab. Persistence is left to a collaborator: the session is built
from the last-known values (restore) and hands back new ones (snapshot).
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Mapping, Optional

from . import config
from .errors import JsonSyntaxError
from .paths import JsonPath
from .token import TokenResult, decode_token
from .tree import ExpansionState, TreeRow, copy_text, find_value, render_rows
from .values import JsonValue, pretty_json, to_json_text, try_parse_json_text

logger = logging.getLogger(__name__)

JSON_INPUT_KEY = "jsonInputData"
JWT_INPUT_KEY = "jwtInputData"
QUOTE_STRINGS_KEY = "stringQuotes"


class Tab(str, Enum):
    JSON = "json"
    JWT = "jwt"

    @classmethod
    def from_param(cls, param: Optional[str]) -> "Tab":
        """Tab named by a ``?tab=`` parameter; anything but "jwt" means JSON."""
        return cls.JWT if param == cls.JWT.value else cls.JSON


@dataclass(frozen=True)
class CopyRequest:
    """Text a view should put on the clipboard, and what to call it."""

    text: str
    label: str


def _now_ms() -> float:
    return time.time() * 1000


class InspectorSession:
    """
    State for one inspector: JSON tree view and token decoder side by side.

    Example:
        >>> session = InspectorSession()
        >>> session.set_json_text('{"a": 1}')
        >>> [row.label for row in session.rows()]
        ['root', 'a']
    """

    def __init__(
        self,
        json_text: str = "",
        token_text: str = "",
        quote_strings: bool = config.QUOTE_STRINGS,
        tab: Tab = Tab.JSON,
        clock: Callable[[], float] = _now_ms,
    ):
        """
        Initialize the session.

        Args:
            json_text: Initial JSON input.
            token_text: Initial token input.
            quote_strings: Wrap string values in quotes in the tree view.
            tab: The active tab.
            clock: Returns the current time in epoch milliseconds.
        """
        self.expansion = ExpansionState()
        self.quote_strings = quote_strings
        self.tab = tab
        self.clock = clock
        self.json_text = ""
        self.token_text = token_text
        self.value: JsonValue = None
        self.has_data = False
        self.set_json_text(json_text)

    # -------------------------------------------------------------------------
    # Persistence hand-off
    # -------------------------------------------------------------------------

    @classmethod
    def restore(cls, store: Mapping[str, str], **kwargs) -> "InspectorSession":
        """
        Build a session from previously persisted values.

        Entries that are not strings are ignored, as if they were missing.
        """
        def text(key: str) -> Optional[str]:
            value = store.get(key)
            if value is not None and not isinstance(value, str):
                logger.warning("Ignoring non-string %s in stored state", key)
                return None
            return value

        quote_strings = text(QUOTE_STRINGS_KEY)
        if quote_strings is not None:
            kwargs["quote_strings"] = quote_strings == "true"
        return cls(
            json_text=text(JSON_INPUT_KEY) or "",
            token_text=text(JWT_INPUT_KEY) or "",
            **kwargs,
        )

    def snapshot(self) -> Dict[str, str]:
        """Values the persistence collaborator should store."""
        return {
            JSON_INPUT_KEY: self.json_text,
            JWT_INPUT_KEY: self.token_text,
            QUOTE_STRINGS_KEY: "true" if self.quote_strings else "false",
        }

    # -------------------------------------------------------------------------
    # Inputs
    # -------------------------------------------------------------------------

    def set_json_text(self, text: str) -> None:
        """Replace the JSON input; a new valid value resets the expansion state."""
        self.json_text = text
        try:
            self.value = try_parse_json_text(text)
        except JsonSyntaxError as e:
            logger.debug("JSON input not parsed: %s", e)
            self.value = None
            self.has_data = False
            return
        self.has_data = True
        self.expansion.load(self.value)

    def set_token_text(self, text: str) -> None:
        self.token_text = text

    def set_quote_strings(self, quote_strings: bool) -> None:
        self.quote_strings = quote_strings

    def set_tab(self, tab: Tab) -> None:
        self.tab = tab

    def clear(self) -> Tab:
        """Clear the active tab's input. Returns the tab that was cleared."""
        if self.tab is Tab.JSON:
            self.set_json_text("")
        else:
            self.set_token_text("")
        logger.debug("Cleared %s input", self.tab.value)
        return self.tab

    def format_json(self) -> str:
        """
        Pretty-print the JSON input in place.

        The parsed value is unchanged, so the expansion state is kept.

        Raises:
            JsonSyntaxError: If the input is not valid JSON.
        """
        self.json_text = pretty_json(self.json_text, indent=config.INDENT)
        return self.json_text

    # -------------------------------------------------------------------------
    # Tree view
    # -------------------------------------------------------------------------

    def rows(self) -> List[TreeRow]:
        if not self.has_data:
            return []
        return render_rows(self.value, self.expansion, self.quote_strings)

    def _require(self, path: JsonPath) -> None:
        if not self.has_data:
            raise LookupError("No JSON data loaded")
        find_value(self.value, path)

    def toggle(self, path: JsonPath) -> None:
        """
        Open or close ``path`` and select it.

        Raises:
            LookupError: If there is no data or the path does not exist.
        """
        self._require(path)
        self.expansion.toggle(path)
        self.expansion.select(path)

    def expand_all(self) -> None:
        if self.has_data:
            self.expansion.expand_all(self.value)

    def collapse_all(self) -> None:
        self.expansion.collapse_all()

    def select(self, path: Optional[JsonPath]) -> None:
        if path is not None:
            self._require(path)
        self.expansion.select(path)

    def copy_value(self, path: JsonPath) -> CopyRequest:
        """
        Select the node at ``path`` and return its copy text.

        Raises:
            LookupError: If there is no data or the path does not exist.
        """
        self._require(path)
        text = copy_text(self.value, path)
        self.expansion.select(path)
        return CopyRequest(text=text, label=str(path) or path.last_segment_label())

    # -------------------------------------------------------------------------
    # Token view
    # -------------------------------------------------------------------------

    def now_ms(self) -> float:
        return self.clock()

    def token_result(self) -> Optional[TokenResult]:
        """Decode the token input; None while the input is blank."""
        if not self.token_text.strip():
            return None
        return decode_token(self.token_text)

    def copy_claim(self, key: str, section: str = "payload") -> CopyRequest:
        """
        Copy text for a header or payload entry (its JSON text).

        Raises:
            LookupError: If the token does not decode or has no such entry.
        """
        result = self.token_result()
        if result is None or not result.ok:
            raise LookupError("No decoded token")
        entries = result.token.header if section == "header" else result.token.payload
        return CopyRequest(text=to_json_text(entries[key]), label=key)

    def copy_signature(self) -> CopyRequest:
        result = self.token_result()
        if result is None or not result.ok:
            raise LookupError("No decoded token")
        return CopyRequest(text=result.token.signature, label="Signature")
