"""日志配置，为根 logger 挂控制台输出。"""

import logging


def setup_logging(level: int = logging.INFO) -> None:
    """为根 logger 挂一个控制台输出，重复调用不会重复添加。"""
    root = logging.getLogger()
    root.setLevel(level)

    if not any(isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        root.addHandler(handler)
