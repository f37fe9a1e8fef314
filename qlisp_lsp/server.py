from __future__ import annotations

"""
A minimal pygls-based Language Server for qlisp.

Features:
- Text synchronization (documents are kept by the pygls workspace)
- Diagnostics: parser syntax errors, unbalanced ( ) and { }
- Hover: builtin signatures and names bound with `def`
- Completion: builtins and names bound with `def`
- Signature Help: for builtins
- Document Symbols: from indexer

Note: We avoid evaluating the buffer. We build a static index per document.
"""

import logging
from typing import Dict, Optional, List
from dataclasses import dataclass

from pygls.server import LanguageServer
from lsprotocol.types import (
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_CLOSE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_DOCUMENT_SYMBOL,
    TEXT_DOCUMENT_HOVER,
    TEXT_DOCUMENT_SIGNATURE_HELP,
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    CompletionOptions,
    CompletionParams,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    DocumentSymbol,
    DocumentSymbolParams,
    Hover,
    HoverParams,
    MarkupContent,
    MarkupKind,
    ParameterInformation,
    Position,
    Range,
    SignatureHelp,
    SignatureHelpOptions,
    SignatureHelpParams,
    SignatureInformation,
    SymbolKind,
)

from qlisp import config
from qlisp.logging_config import setup_logging
from qlisp.reader.parser import parse
from qlisp.types.errors import QLispSyntaxError
from qlisp_lsp.indexer import build_index, BUILTIN_SIGNATURES, DocumentIndex

logger = logging.getLogger(__name__)

SOURCE = "qlisp-ls"


@dataclass
class DocumentState:
    text: str
    index: DocumentIndex


class QLispLanguageServer(LanguageServer):
    CMD_NAME = "qlisp-ls"

    def __init__(self):
        super().__init__(self.CMD_NAME, config.VERSION)
        self.documents: Dict[str, DocumentState] = {}


ls = QLispLanguageServer()


# --- Text sync ---
def _refresh(uri: str) -> None:
    text = ls.workspace.get_text_document(uri).source
    idx = build_index(text)
    ls.documents[uri] = DocumentState(text=text, index=idx)
    ls.publish_diagnostics(uri, collect_diagnostics(text, idx))


@ls.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(params: DidOpenTextDocumentParams):
    _refresh(params.text_document.uri)


@ls.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(params: DidChangeTextDocumentParams):
    _refresh(params.text_document.uri)


@ls.feature(TEXT_DOCUMENT_DID_CLOSE)
def did_close(params: DidCloseTextDocumentParams):
    uri = params.text_document.uri
    ls.documents.pop(uri, None)
    ls.publish_diagnostics(uri, [])


# --- Diagnostics ---
def _mk_range(line: int, col: int, length: int = 1) -> Range:
    return Range(start=Position(line=line, character=col), end=Position(line=line, character=col + length))


def collect_diagnostics(text: str, idx: DocumentIndex) -> List[Diagnostic]:
    """Syntax errors reported by the real parser, plus delimiter balance warnings."""
    diags: List[Diagnostic] = []

    # Each line is its own phrase at the REPL, so each line is parsed on its own
    for lineno, line_text in enumerate(text.splitlines()):
        try:
            parse(line_text)
        except QLispSyntaxError as e:
            col = (e.col or 1) - 1
            diags.append(
                Diagnostic(
                    range=_mk_range(lineno, col),
                    message=e.message,
                    severity=DiagnosticSeverity.Error,
                    source=SOURCE,
                )
            )

    if idx.paren_balance != 0:
        diags.append(
            Diagnostic(
                range=_mk_range(0, 0),
                message="Unmatched parentheses detected",
                severity=DiagnosticSeverity.Warning,
                source=SOURCE,
            )
        )
    if idx.brace_balance != 0:
        diags.append(
            Diagnostic(
                range=_mk_range(0, 0),
                message="Unmatched braces detected",
                severity=DiagnosticSeverity.Warning,
                source=SOURCE,
            )
        )
    return diags


# --- Hover ---
def hover_text(state: DocumentState, word: str) -> Optional[str]:
    if word in BUILTIN_SIGNATURES:
        return BUILTIN_SIGNATURES[word]
    sdef = state.index.symbols.get(word)
    if sdef is not None:
        return f"{word}: defined at {sdef.line + 1}:{sdef.col + 1}"
    return None


@ls.feature(TEXT_DOCUMENT_HOVER)
def on_hover(params: HoverParams) -> Optional[Hover]:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return None

    word = extract_word_at(state.text, params.position)
    if not word:
        return None
    contents = hover_text(state, word)
    if contents is None:
        return None
    return Hover(contents=MarkupContent(kind=MarkupKind.PlainText, value=contents))


# --- Completion ---
def completion_items(state: Optional[DocumentState]) -> List[CompletionItem]:
    items: List[CompletionItem] = []
    for name, sig in BUILTIN_SIGNATURES.items():
        items.append(CompletionItem(label=name, kind=CompletionItemKind.Function, detail=sig))
    if state:
        for name in state.index.symbols:
            if name not in BUILTIN_SIGNATURES:
                items.append(CompletionItem(label=name, kind=CompletionItemKind.Variable))
    return items


@ls.feature(TEXT_DOCUMENT_COMPLETION, CompletionOptions(trigger_characters=["(", "{"]))
def on_completion(params: CompletionParams) -> CompletionList:
    state = ls.documents.get(params.text_document.uri)
    return CompletionList(is_incomplete=False, items=completion_items(state))


# --- Signature Help ---
def signature_for(callee: str) -> Optional[SignatureInformation]:
    sig = BUILTIN_SIGNATURES.get(callee)
    if not sig:
        return None
    # Split rendering into name and params between parentheses
    params_text = sig[sig.find("(") + 1 : sig.rfind(")")]
    params_list = params_text.split()[1:]
    return SignatureInformation(label=sig, parameters=[ParameterInformation(label=p) for p in params_list])


@ls.feature(TEXT_DOCUMENT_SIGNATURE_HELP, SignatureHelpOptions(trigger_characters=["(", " "]))
def on_signature_help(params: SignatureHelpParams) -> Optional[SignatureHelp]:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return None

    callee = extract_callee_name(get_line_prefix(state.text, params.position))
    if not callee:
        return None
    info = signature_for(callee)
    if info is None:
        return None
    return SignatureHelp(signatures=[info], active_signature=0, active_parameter=0)


# --- Document Symbols ---
@ls.feature(TEXT_DOCUMENT_DOCUMENT_SYMBOL)
def on_document_symbols(params: DocumentSymbolParams) -> Optional[List[DocumentSymbol]]:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return None
    symbols: List[DocumentSymbol] = []
    for name, sdef in state.index.symbols.items():
        rng = _mk_range(sdef.line, sdef.col, len(name))
        symbols.append(DocumentSymbol(name=name, kind=SymbolKind.Variable, range=rng, selection_range=rng))
    return symbols


# --- Helpers ---
DELIMITERS = " \t()\n\r{}"


def get_line_prefix(text: str, pos: Position) -> str:
    # Return the text from start of line up to pos
    lines = text.splitlines(True)
    if pos.line >= len(lines):
        return ""
    return lines[pos.line][: pos.character]


def extract_word_at(text: str, pos: Position) -> Optional[str]:
    lines = text.splitlines(True)
    if pos.line >= len(lines):
        return None
    line = lines[pos.line]
    start = pos.character
    while start > 0 and line[start - 1] not in DELIMITERS:
        start -= 1
    end = pos.character
    while end < len(line) and line[end] not in DELIMITERS:
        end += 1
    return line[start:end] or None


def extract_callee_name(prefix: str) -> Optional[str]:
    # find last '(' and take following token; a bare line is a phrase headed by its first token
    lp = prefix.rfind("(")
    tail = prefix[lp + 1 :].lstrip()
    if not tail:
        return None
    for i, ch in enumerate(tail):
        if ch in DELIMITERS:
            return tail[:i] or None
    return tail


def main() -> None:
    setup_logging(config.get_log_level(), config.get_log_file())
    # Run the language server over stdio
    ls.start_io()


if __name__ == "__main__":
    main()
