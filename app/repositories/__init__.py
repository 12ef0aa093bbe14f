"""레포지토리 패키지 — 데이터베이스 쿼리 계층.

Repository package — Database query layer.
BaseRepository carries the generic id lookup, create, delete and existence
checks; product_repository adds paging, sorting and search, user_repository
the username lookup.
"""
