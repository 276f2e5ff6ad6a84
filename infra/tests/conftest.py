"""
Shared pytest fixtures.

Stacks are synthesized once per session: jsii start-up and CDK synthesis
dominate test time. Two apps are built, one with an ACM certificate
(HTTP → HTTPS redirect) and one without (plain HTTP).

make_settings passes every field explicitly, defaults included, so variables
exported in the shell running pytest never reach the stacks under test.
"""
import aws_cdk as cdk
import pytest
from aws_cdk.assertions import Template

from deployment import DeploymentStacks, build_stacks
from settings import Settings

TEST_CERT_ARN = (
    "arn:aws:acm:us-east-1:123456789012:certificate/"
    "00000000-1111-2222-3333-444444444444"
)
TEST_SECRET_ARN = (
    "arn:aws:secretsmanager:us-east-1:123456789012:secret:github-oauth-token-AbCdEf"
)


def make_settings(**overrides) -> Settings:
    values = {
        name: field.default
        for name, field in Settings.model_fields.items()
        if not field.is_required()
    }
    values.update({
        "environment": "dev",
        "aws_account_id": "",
        "aws_region": "us-east-1",
        "acm_certificate_arn": TEST_CERT_ARN,
        "git_oauth_token_secret_arn": TEST_SECRET_ARN,
        "vpc_cidr": "10.0.0.0/16",
        "instance_class": "t2",
        "dev_instance_size": "micro",
        "prod_instance_size": "micro",
        "deploy_tag_key": "Example",
        "deploy_tag_value": "Deploy-Webapp-EC2-CDK-Script",
        "log_level": "INFO",
    })
    values.update(overrides)
    return Settings(**values)


@pytest.fixture(scope="session")
def settings() -> Settings:
    return make_settings()


@pytest.fixture(scope="session")
def stacks(settings: Settings) -> DeploymentStacks:
    return build_stacks(cdk.App(), settings)


@pytest.fixture(scope="session")
def http_only_stacks() -> DeploymentStacks:
    return build_stacks(cdk.App(), make_settings(acm_certificate_arn=""))


@pytest.fixture(scope="session")
def network_template(stacks: DeploymentStacks) -> Template:
    return Template.from_stack(stacks.network)


@pytest.fixture(scope="session")
def compute_template(stacks: DeploymentStacks) -> Template:
    return Template.from_stack(stacks.compute)


@pytest.fixture(scope="session")
def load_balancer_template(stacks: DeploymentStacks) -> Template:
    return Template.from_stack(stacks.load_balancer)


@pytest.fixture(scope="session")
def pipeline_template(stacks: DeploymentStacks) -> Template:
    return Template.from_stack(stacks.pipeline)
