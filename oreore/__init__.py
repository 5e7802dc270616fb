# Analysis core of the oreore language: lexer, parser, expander/resolver and
# type checker, plus the per-URI document store the language server queries.
#
# Naming guidance:
# - S* classes (SArray, SVariable, ...) are parse nodes, before resolution.
# - *Node classes (DefunNode, CallNode, ...) are resolved AST nodes.

from oreore.compiler import CompiledDocument, DocumentStore, compile_document

__all__ = ["CompiledDocument", "DocumentStore", "compile_document"]
