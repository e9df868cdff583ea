"""核心逻辑：清单解析、索引查询、更新判定"""
