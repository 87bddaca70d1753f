"""termlayout - 终端工作区分屏布局引擎"""

__version__ = "0.1.0"
