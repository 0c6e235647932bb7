"""
aacboard - command resolution for AAC communication boards.

Turns a spoken or typed request ("delete the second button in the last row",
"make a button for I'm thirsty") into one executable board command plus a
confirmation, falling back to a local LLM only when the grammars cannot decide.
"""

__version__ = "0.1.0"
