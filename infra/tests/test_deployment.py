import aws_cdk as cdk
from aws_cdk.assertions import Match, Template

from deployment import DeploymentStacks, build_stacks

from conftest import make_settings


def _dependency_names(stack: cdk.Stack) -> set[str]:
    return {dep.stack_name for dep in stack.dependencies}


def test_stack_ids_use_environment_prefix(stacks: DeploymentStacks):
    assert stacks.network.stack_name == "WebappDeployDevNetwork"
    assert stacks.compute.stack_name == "WebappDeployDevCompute"
    assert stacks.load_balancer.stack_name == "WebappDeployDevLoadBalancer"
    assert stacks.pipeline.stack_name == "WebappDeployDevPipeline"


def test_dependencies_follow_references():
    app = cdk.App()
    stacks = build_stacks(app, make_settings())
    app.synth()

    assert _dependency_names(stacks.network) == set()
    assert _dependency_names(stacks.pipeline) == set()
    assert _dependency_names(stacks.compute) == {
        "WebappDeployDevNetwork",
        "WebappDeployDevPipeline",
    }
    assert _dependency_names(stacks.load_balancer) == {
        "WebappDeployDevNetwork",
        "WebappDeployDevCompute",
    }


def test_explicit_account_and_region():
    app = cdk.App()
    stacks = build_stacks(
        app, make_settings(aws_account_id="123456789012", aws_region="eu-west-1")
    )
    for stack in stacks:
        assert stack.account == "123456789012"
        assert stack.region == "eu-west-1"


def test_environment_tag_applied(stacks: DeploymentStacks):
    Template.from_stack(stacks.compute).has_resource_properties(
        "AWS::EC2::Instance",
        {"Tags": Match.array_with([{"Key": "Environment", "Value": "dev"}])},
    )


def test_prod_names_resources_for_prod():
    app = cdk.App()
    stacks = build_stacks(app, make_settings(environment="prod"))
    assert stacks.network.stack_name == "WebappDeployProdNetwork"
    Template.from_stack(stacks.network).has_resource_properties(
        "AWS::EC2::SecurityGroup", {"GroupName": "ec2-sg-prod"}
    )
    Template.from_stack(stacks.compute).has_resource_properties(
        "AWS::EC2::Instance",
        {
            "InstanceType": "t2.micro",
            "Tags": Match.array_with(
                [{"Key": "Name", "Value": "webapp-prod-instance"}]
            ),
        },
    )


def test_deploy_tag_follows_settings():
    app = cdk.App()
    stacks = build_stacks(
        app, make_settings(deploy_tag_key="Deploy", deploy_tag_value="webapp")
    )
    Template.from_stack(stacks.compute).has_resource_properties(
        "AWS::EC2::Instance",
        {"Tags": Match.array_with([{"Key": "Deploy", "Value": "webapp"}])},
    )
