"""
Stack wiring for the web app deployment.

Dependency order (resolved by CDK from cross-stack references):
  Network → Pipeline → Compute → LoadBalancer

Compute depends on Pipeline because the instance role is granted read
access to the pipeline artifact bucket.
"""
import logging
from typing import NamedTuple

import aws_cdk as cdk

from settings import Settings
from stacks.compute_stack import ComputeStack
from stacks.load_balancer_stack import LoadBalancerStack
from stacks.network_stack import NetworkStack
from stacks.pipeline_stack import PipelineStack

logger = logging.getLogger(__name__)


class DeploymentStacks(NamedTuple):
    network: NetworkStack
    compute: ComputeStack
    load_balancer: LoadBalancerStack
    pipeline: PipelineStack


def build_stacks(app: cdk.App, settings: Settings) -> DeploymentStacks:
    prefix = settings.stack_prefix
    env = settings.cdk_environment
    logger.info(
        "Building %s stacks (env=%s, account=%s, region=%s)",
        prefix,
        settings.environment,
        settings.aws_account_id or "<agnostic>",
        settings.aws_region,
    )

    # 1. Network (VPC, public subnets, web security group)
    network = NetworkStack(
        app,
        f"{prefix}Network",
        env_name=settings.environment,
        vpc_cidr=settings.vpc_cidr,
        max_azs=settings.max_azs,
        env=env,
    )

    # 2. Compute (key pair, EC2 web server, Elastic IP)
    compute = ComputeStack(
        app,
        f"{prefix}Compute",
        vpc=network.vpc,
        sg_web=network.sg_web,
        env_name=settings.environment,
        instance_type=settings.instance_type,
        key_pair_name=settings.key_pair_name,
        region=settings.aws_region,
        env=env,
    )
    logger.debug("Web server instance type: %s", settings.instance_type)

    # 3. Load balancer (ALB, target group, listeners)
    load_balancer = LoadBalancerStack(
        app,
        f"{prefix}LoadBalancer",
        vpc=network.vpc,
        sg_web=network.sg_web,
        app_instance=compute.instance,
        load_balancer_name=settings.load_balancer_name,
        acm_cert_arn=settings.acm_certificate_arn,
        env=env,
    )

    # 4. CI/CD (GitHub → CodeBuild → CodeDeploy)
    pipeline = PipelineStack(
        app,
        f"{prefix}Pipeline",
        app_instance=compute.instance,
        pipeline_name=settings.pipeline_name,
        github_owner=settings.github_owner,
        github_repo=settings.github_repo,
        github_branch=settings.github_branch,
        oauth_token_secret_arn=settings.git_oauth_token_secret_arn,
        build_project_name=settings.build_project_name,
        app_dir=settings.app_dir,
        bundle_dir=settings.bundle_dir,
        node_version=settings.node_version,
        application_name=settings.application_name,
        deployment_group_name=settings.deployment_group_name,
        deploy_tag_key=settings.deploy_tag_key,
        deploy_tag_value=settings.deploy_tag_value,
        env=env,
    )
    logger.debug(
        "Pipeline source: %s/%s@%s",
        settings.github_owner,
        settings.github_repo,
        settings.github_branch,
    )

    cdk.Tags.of(app).add(settings.deploy_tag_key, settings.deploy_tag_value)
    cdk.Tags.of(app).add("Environment", settings.environment)

    return DeploymentStacks(
        network=network,
        compute=compute,
        load_balancer=load_balancer,
        pipeline=pipeline,
    )
