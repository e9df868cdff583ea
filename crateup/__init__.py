"""crateup - cargo install 已安装包的更新检查与升级工具"""

__version__ = "0.3.0"
