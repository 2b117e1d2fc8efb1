"""
plugins/aws - AWS import 식별자 해석
"""

IMPORTER = {
    "name": "aws",
    "description": "AWS 리소스 import 식별자 해석",
    "description_en": "Resolve import identifiers for AWS resources",
    "module": "importer",
    "class": "AwsImporter",
}
