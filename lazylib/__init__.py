"""lazylib - 按需物化远程源码树的依赖拉取器"""

__version__ = "0.1.0"
