"""
plugins - Importer 플러그인 루트

각 하위 패키지는 __init__.py에 IMPORTER 메타데이터를 선언합니다.
(core.discovery 참고)
"""
