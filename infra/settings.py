"""
Deployment settings loaded from environment variables.

Priority:
  1. Environment variables (always win)
  2. .env file in project root, loaded by app.py before Settings() is built
  3. Defaults

The only required value is GIT_OAUTH_TOKEN_SECRET_ARN: the Secrets Manager
secret holding the GitHub OAuth token used by the pipeline source stage.
"""
import logging
from functools import lru_cache
from typing import Optional

import aws_cdk as cdk
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        extra="ignore",
        case_sensitive=False,
    )

    # ------------------------------------------------------------------ #
    # Target
    # ------------------------------------------------------------------ #
    environment: str = "dev"
    aws_account_id: str = ""
    aws_region: str = "us-east-1"

    # ------------------------------------------------------------------ #
    # Network
    # ------------------------------------------------------------------ #
    vpc_cidr: str = "10.0.0.0/16"
    max_azs: int = 3

    # ------------------------------------------------------------------ #
    # Compute
    # ------------------------------------------------------------------ #
    instance_class: str = "t2"
    dev_instance_size: str = "micro"
    prod_instance_size: str = "micro"
    key_pair_name: str = "webapp-ec2-keypair"

    # ------------------------------------------------------------------ #
    # Load balancer
    # ------------------------------------------------------------------ #
    acm_certificate_arn: str = ""
    load_balancer_name: str = "Webapp-Load-Balancer"

    # ------------------------------------------------------------------ #
    # Pipeline source (GitHub)
    # ------------------------------------------------------------------ #
    github_owner: str = "SharjeelSafdar"
    github_repo: str = "ec2-deploy-example"
    github_branch: str = "main"
    git_oauth_token_secret_arn: str

    # ------------------------------------------------------------------ #
    # Pipeline build / deploy
    # ------------------------------------------------------------------ #
    pipeline_name: str = "WebappDeployPipeline"
    build_project_name: str = "BuildWebApp"
    node_version: int = 14
    app_dir: str = "sample-react-app"
    bundle_dir: str = "ec2-deploy-cdk-script/ec2"
    application_name: str = "EC2-Server-Application"
    deployment_group_name: str = "Webapp-Deployment-Group"

    # CodeDeploy finds target instances by this tag
    deploy_tag_key: str = "Example"
    deploy_tag_value: str = "Deploy-Webapp-EC2-CDK-Script"

    log_level: str = "INFO"

    # ------------------------------------------------------------------ #
    # Computed properties
    # ------------------------------------------------------------------ #

    @property
    def is_production(self) -> bool:
        return self.environment == "prod"

    @property
    def instance_size(self) -> str:
        return self.prod_instance_size if self.is_production else self.dev_instance_size

    @property
    def instance_type(self) -> str:
        """EC2 instance type string, e.g. ``t2.micro``."""
        return f"{self.instance_class}.{self.instance_size}"

    @property
    def https_enabled(self) -> bool:
        return bool(self.acm_certificate_arn)

    @property
    def stack_prefix(self) -> str:
        return f"WebappDeploy{self.environment.capitalize()}"

    @property
    def cdk_environment(self) -> Optional[cdk.Environment]:
        """Explicit account/region, or None for environment-agnostic stacks."""
        if self.aws_account_id and self.aws_region:
            return cdk.Environment(account=self.aws_account_id, region=self.aws_region)
        return None

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        allowed = {"dev", "prod"}
        if v.lower() not in allowed:
            raise ValueError(f"ENVIRONMENT must be one of {sorted(allowed)}")
        return v.lower()

    @field_validator("git_oauth_token_secret_arn")
    @classmethod
    def validate_secret_arn(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("GIT_OAUTH_TOKEN_SECRET_ARN must not be blank")
        return v.strip()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"LOG_LEVEL '{v}' is not a logging level")
        return level


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
