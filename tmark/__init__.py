"""tmark - tmux bookmarks for your directories"""

__version__ = "0.1.0"
