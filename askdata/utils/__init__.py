"""Pure helpers: SQL guard, schema descriptors, chart data shaping"""
