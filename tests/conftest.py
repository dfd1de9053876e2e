from __future__ import annotations

import pytest

from ragrank.models import Passage

LAMBDA_URI = "https://docs.aws.amazon.com/lambda/latest/dg/lambda-intro.html"

LAMBDA_INTRO = (
    "AWS Lambda is a compute service that lets you run code without provisioning or managing servers. "
    "Lambda runs your code on a high-availability compute infrastructure and performs all of the "
    "administration of the compute resources."
)
LAMBDA_EVENTS = (
    "You can use Lambda to run code in response to events, such as changes to data in an Amazon Simple "
    "Storage Service (Amazon S3) bucket or an Amazon DynamoDB table."
)
LAMBDA_PRICING = (
    "With AWS Lambda, you pay only for what you use. You are charged based on the number of requests for "
    "your functions and the duration."
)
LAMBDA_TUTORIAL = (
    "This comprehensive tutorial covers all aspects of AWS Lambda development, from basic concepts to "
    "advanced deployment strategies. Lambda is a serverless computing service provided by Amazon Web "
    "Services (AWS) that allows you to run code without provisioning or managing servers. The service "
    "automatically manages the compute resources required to run your code, scaling up or down based on "
    "demand. Lambda supports multiple programming languages including Python, Node.js, Java, C#, and Go. "
    "You can trigger Lambda functions through various AWS services such as S3, DynamoDB, API Gateway, "
    "and many others."
)
SHORT_NOTE = "Lambda is serverless."


@pytest.fixture
def lambda_passages() -> list[Passage]:
    return [
        Passage(
            source_id="doc1",
            source_uri=LAMBDA_URI,
            title="AWS Lambda Developer Guide",
            content=LAMBDA_INTRO,
            attributes={"_file_type": "html", "_language_code": "en", "_excerpt_page_number": 1},
            confidence="HIGH",
        ),
        Passage(
            source_id="doc1",
            source_uri=LAMBDA_URI,
            title="AWS Lambda Developer Guide",
            content=LAMBDA_EVENTS,
            attributes={"_file_type": "html", "_language_code": "en", "_excerpt_page_number": 1},
            confidence="HIGH",
        ),
        Passage(
            source_id="doc2",
            source_uri="https://aws.amazon.com/lambda/pricing/",
            title="Lambda Pricing",
            content=LAMBDA_PRICING,
            attributes={"_file_type": "html", "_language_code": "en"},
            confidence="MEDIUM",
        ),
        Passage(
            source_id="doc3",
            source_uri="https://example.com/lambda-tutorial.pdf",
            title="Comprehensive AWS Lambda Tutorial",
            content=LAMBDA_TUTORIAL,
            attributes={"_file_type": "pdf", "_language_code": "en", "_excerpt_page_number": 5},
            confidence="VERY_HIGH",
        ),
        Passage(
            source_id="doc4",
            source_uri="https://example.com/short-note.txt",
            title="Short Note",
            content=SHORT_NOTE,
            attributes={"_file_type": "txt", "_language_code": "en"},
            confidence="LOW",
        ),
    ]
