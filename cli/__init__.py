"""cli - terraform-plan-importer 명령줄 인터페이스"""
