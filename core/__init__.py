# core/__init__.py
"""
core - terraform-plan-importer 코어

IaC에 선언된 리소스의 import 식별자를 해석하는 레지스트리/dispatch 코어입니다.

아키텍처:
    core/
    ├── attributes.py   # 선언 속성값 타입 접근자 (AttributeView)
    ├── importer.py     # Importer 기본 클래스 + dispatch
    ├── registry.py     # Importer 레지스트리
    ├── discovery.py    # plugins/ 자동 발견 + 레지스트리 부트스트랩
    ├── deadline.py     # 호출자 deadline
    ├── plan.py         # Terraform plan JSON -> ResourceDeclaration
    ├── parallel/       # 일괄 병렬 해석, boto3 client 헬퍼
    ├── config.py       # 중앙 설정 관리
    └── exceptions.py   # 통합 예외 계층

Usage:
    from core.discovery import build_registry

    registry = build_registry()
    importer = registry.lookup("aws")
    importer.get_import_name("aws_ecs_service", "web", {"cluster": "prod"})
"""

__all__: list[str] = [
    "attributes",
    "config",
    "deadline",
    "discovery",
    "exceptions",
    "importer",
    "parallel",
    "plan",
    "registry",
]
