"""配置加载（pydantic-settings + config.yaml）。"""
