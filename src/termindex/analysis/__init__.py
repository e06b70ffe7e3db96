"""Text analysis collaborators used by the index writer.

- tokens: Token and the restartable TokenStream
- tokenizer: regex tokenizer raising TokenizerError on unusable input
- filters: lowercase, punctuation, stopword and stemming filters built on TermFilter
- analyzers: FieldAnalyzer, the analyze() driver and the per-field AnalyzerFactory
"""

from termindex.analysis.analyzers import Analyzer, AnalyzerFactory, FieldAnalyzer, analyze
from termindex.analysis.tokenizer import Tokenizer, TokenizerError
from termindex.analysis.tokens import Token, TokenStream


__all__ = [
    "Analyzer",
    "AnalyzerFactory",
    "FieldAnalyzer",
    "Token",
    "TokenStream",
    "Tokenizer",
    "TokenizerError",
    "analyze",
]
