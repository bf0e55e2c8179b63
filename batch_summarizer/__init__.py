"""
Batch Summarizer - summarizes every PDF/TXT document in a folder with a
local Ollama model, one summary file per document.
"""

__version__ = "1.0.0"
