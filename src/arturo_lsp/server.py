"""
Arturo Language Server

pygls server wiring: every LSP request kind is registered here and routed
to the matching handler in arturo_lsp.features. Handlers read from the
session's DocumentAnalysis, which is rebuilt on every open and change.
"""

import logging
from typing import List, Optional

from lsprotocol import types
from pygls.lsp.server import LanguageServer

from arturo_lsp import __version__
from arturo_lsp.analysis.lint import ArturoLinter
from arturo_lsp.analysis.session import DocumentAnalysis, Session
from arturo_lsp.config import ServerSettings, apply_overrides, client_settings
from arturo_lsp.errors import RenameError
from arturo_lsp.features import (
    completion,
    diagnostics,
    folding,
    formatting,
    hover,
    inlay_hints,
    navigation,
    outline,
    rename,
    semantic_tokens,
    signature_help,
)

logger = logging.getLogger(__name__)


class ArturoLanguageServer(LanguageServer):
    """Language server holding the document session and settings."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.settings = ServerSettings()
        self.session = Session(ArturoLinter.from_settings(self.settings.diagnostics))

    def apply_settings(self, settings: ServerSettings) -> None:
        """Install new settings and re-publish diagnostics for open documents."""
        self.settings = settings
        for analysis in self.session.configure(ArturoLinter.from_settings(settings.diagnostics)):
            self.publish(analysis)

    def analyse(self, uri: str) -> DocumentAnalysis:
        document = self.workspace.get_text_document(uri)
        return self.session.change(uri, document.source, document.version)

    def document(self, uri: str) -> Optional[DocumentAnalysis]:
        analysis = self.session.get(uri)
        if analysis is None:
            logger.debug("No analysis for %s", uri)
        return analysis

    def publish(self, analysis: DocumentAnalysis) -> None:
        self.text_document_publish_diagnostics(
            types.PublishDiagnosticsParams(
                uri=analysis.uri,
                diagnostics=diagnostics.to_diagnostics(analysis.issues),
                version=analysis.version,
            )
        )

    def show(self, message: str, message_type: types.MessageType) -> None:
        self.window_show_message(types.ShowMessageParams(type=message_type, message=message))


server = ArturoLanguageServer(
    "arturo-lsp", __version__,
    text_document_sync_kind=types.TextDocumentSyncKind.Incremental,
)


# ---------------------------------------------------------------------------
# Lifecycle and configuration
# ---------------------------------------------------------------------------

@server.feature(types.INITIALIZE)
def on_initialize(params: types.InitializeParams):
    overrides = client_settings(params.initialization_options)
    if overrides:
        server.apply_settings(apply_overrides(server.settings, overrides, "initializationOptions"))
    logger.info("Initialized arturo-lsp %s", __version__)


@server.feature(types.WORKSPACE_DID_CHANGE_CONFIGURATION)
def did_change_configuration(params: types.DidChangeConfigurationParams):
    overrides = client_settings(params.settings)
    if overrides:
        server.apply_settings(apply_overrides(server.settings, overrides, "didChangeConfiguration"))


# ---------------------------------------------------------------------------
# Text document synchronisation
# ---------------------------------------------------------------------------

@server.feature(types.TEXT_DOCUMENT_DID_OPEN)
def did_open(params: types.DidOpenTextDocumentParams):
    server.publish(server.analyse(params.text_document.uri))


@server.feature(types.TEXT_DOCUMENT_DID_CHANGE)
def did_change(params: types.DidChangeTextDocumentParams):
    server.publish(server.analyse(params.text_document.uri))


@server.feature(types.TEXT_DOCUMENT_DID_CLOSE)
def did_close(params: types.DidCloseTextDocumentParams):
    uri = params.text_document.uri
    server.session.close(uri)
    server.text_document_publish_diagnostics(
        types.PublishDiagnosticsParams(uri=uri, diagnostics=[])
    )


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

@server.feature(types.TEXT_DOCUMENT_HOVER)
def on_hover(params: types.HoverParams) -> Optional[types.Hover]:
    analysis = server.document(params.text_document.uri)
    if analysis is None:
        return None
    return hover.hover(analysis, params.position)


@server.feature(
    types.TEXT_DOCUMENT_COMPLETION,
    types.CompletionOptions(trigger_characters=completion.TRIGGER_CHARACTERS),
)
def on_completion(params: types.CompletionParams) -> List[types.CompletionItem]:
    analysis = server.document(params.text_document.uri)
    return completion.complete(analysis, params.position)


@server.feature(
    types.TEXT_DOCUMENT_SIGNATURE_HELP,
    types.SignatureHelpOptions(
        trigger_characters=signature_help.TRIGGER_CHARACTERS,
        retrigger_characters=signature_help.RETRIGGER_CHARACTERS,
    ),
)
def on_signature_help(params: types.SignatureHelpParams) -> Optional[types.SignatureHelp]:
    analysis = server.document(params.text_document.uri)
    if analysis is None:
        return None
    return signature_help.signature_help(analysis, params.position)


@server.feature(types.TEXT_DOCUMENT_DEFINITION)
def on_definition(params: types.DefinitionParams) -> Optional[types.Location]:
    analysis = server.document(params.text_document.uri)
    if analysis is None:
        return None
    return navigation.definition(analysis, params.position)


@server.feature(types.TEXT_DOCUMENT_REFERENCES)
def on_references(params: types.ReferenceParams) -> List[types.Location]:
    analysis = server.document(params.text_document.uri)
    if analysis is None:
        return []
    return navigation.references(analysis, params.position)


@server.feature(types.TEXT_DOCUMENT_DOCUMENT_HIGHLIGHT)
def on_document_highlight(params: types.DocumentHighlightParams) -> List[types.DocumentHighlight]:
    analysis = server.document(params.text_document.uri)
    if analysis is None:
        return []
    return navigation.highlights(analysis, params.position)


@server.feature(types.TEXT_DOCUMENT_PREPARE_RENAME)
def on_prepare_rename(params: types.PrepareRenameParams):
    analysis = server.document(params.text_document.uri)
    if analysis is None:
        return None
    return rename.prepare_rename(analysis, params.position)


@server.feature(types.TEXT_DOCUMENT_RENAME)
def on_rename(params: types.RenameParams) -> Optional[types.WorkspaceEdit]:
    analysis = server.document(params.text_document.uri)
    if analysis is None:
        return None
    try:
        outcome = rename.rename(analysis, params.position, params.new_name)
    except RenameError as e:
        server.show(e.message, types.MessageType.Error)
        return None
    if outcome is None:
        return None
    for warning in outcome.warnings:
        server.show(warning, types.MessageType.Warning)
    return outcome.edit


@server.feature(types.TEXT_DOCUMENT_FORMATTING)
def on_formatting(params: types.DocumentFormattingParams) -> List[types.TextEdit]:
    analysis = server.document(params.text_document.uri)
    if analysis is None:
        return []
    return formatting.format_edits(analysis.lines, server.settings.formatting.indent_size)


@server.feature(types.TEXT_DOCUMENT_FOLDING_RANGE)
def on_folding_range(params: types.FoldingRangeParams) -> List[types.FoldingRange]:
    analysis = server.document(params.text_document.uri)
    if analysis is None:
        return []
    return folding.folding_ranges(analysis)


@server.feature(types.TEXT_DOCUMENT_DOCUMENT_SYMBOL)
def on_document_symbol(params: types.DocumentSymbolParams) -> List[types.DocumentSymbol]:
    analysis = server.document(params.text_document.uri)
    if analysis is None:
        return []
    return outline.document_symbols(analysis)


@server.feature(types.WORKSPACE_SYMBOL)
def on_workspace_symbol(params: types.WorkspaceSymbolParams) -> List[types.WorkspaceSymbol]:
    return outline.workspace_symbols(server.session, params.query)


@server.feature(types.TEXT_DOCUMENT_INLAY_HINT, types.InlayHintOptions(resolve_provider=False))
def on_inlay_hint(params: types.InlayHintParams) -> List[types.InlayHint]:
    analysis = server.document(params.text_document.uri)
    if analysis is None:
        return []
    options = server.settings.inlay_hints
    return inlay_hints.inlay_hints(
        analysis, params.range,
        parameter_names=options.parameter_names,
        type_names=options.types,
    )


@server.feature(types.TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL, semantic_tokens.LEGEND)
def on_semantic_tokens(params: types.SemanticTokensParams) -> types.SemanticTokens:
    analysis = server.document(params.text_document.uri)
    if analysis is None:
        return types.SemanticTokens(data=[])
    return semantic_tokens.semantic_tokens(analysis)


def serve(tcp: bool = False, host: str = "127.0.0.1", port: int = 2087) -> None:
    """Run the server over stdio, or TCP when requested."""
    if tcp:
        logger.info("Serving on %s:%d", host, port)
        server.start_tcp(host, port)
    else:
        server.start_io()
