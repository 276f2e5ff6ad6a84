"""
PipelineStack — CodePipeline: GitHub → CodeBuild → CodeDeploy (EC2).

Stages
  GetSourceCode      GitHub webhook source (OAuth token from Secrets Manager)
  BuildApp           CodeBuild: npm build + bundle appspec.yml and hook scripts
  DeployWebappToEC2  CodeDeploy in-place, one instance at a time

Target instances are selected by tag, not by reference: deployment.py tags
the whole app with the same DEPLOY_TAG_KEY / DEPLOY_TAG_VALUE pair.
"""
from typing import Any

import aws_cdk as cdk
from aws_cdk import aws_codebuild as codebuild
from aws_cdk import aws_codedeploy as codedeploy
from aws_cdk import aws_codepipeline as codepipeline
from aws_cdk import aws_codepipeline_actions as actions
from aws_cdk import aws_ec2 as ec2
from constructs import Construct

SOURCE_ARTIFACT = "SourceCode"
BUILD_ARTIFACT = "BuiltApp"


def make_build_spec(app_dir: str, bundle_dir: str, node_version: int) -> dict[str, Any]:
    """
    Buildspec for the web app.

    Paths in the build phase are relative to ``app_dir``; ``bundle_dir`` is
    relative to the source root.
    """
    app_dir = app_dir.strip("/")
    bundle_dir = bundle_dir.strip("/")
    return {
        "version": "0.2",
        "phases": {
            "install": {
                "runtime-versions": {"nodejs": node_version},
                "commands": [f"cd {app_dir}/", "npm i"],
            },
            "build": {
                "commands": [
                    "npm run build",
                    f"cp ../{bundle_dir}/appspec.yml ./build/",
                    f"cp -r ../{bundle_dir}/scripts/ ./build/",
                ],
            },
        },
        "artifacts": {
            "base-directory": f"{app_dir}/build",
            "files": ["**/*"],
        },
    }


class PipelineStack(cdk.Stack):
    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        app_instance: ec2.Instance,
        pipeline_name: str,
        github_owner: str,
        github_repo: str,
        github_branch: str,
        oauth_token_secret_arn: str,
        build_project_name: str,
        app_dir: str,
        bundle_dir: str,
        node_version: int,
        application_name: str,
        deployment_group_name: str,
        deploy_tag_key: str,
        deploy_tag_value: str,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.pipeline = codepipeline.Pipeline(
            self,
            "WebappDeployPipeline",
            pipeline_name=pipeline_name,
            cross_account_keys=False,
            restart_execution_on_update=True,
        )

        # The CodeDeploy agent pulls revisions straight from the artifact bucket
        self.pipeline.artifact_bucket.grant_read(app_instance)

        source_output = codepipeline.Artifact(SOURCE_ARTIFACT)
        build_output = codepipeline.Artifact(BUILD_ARTIFACT)

        # ------------------------------------------------------------------ #
        # Stage 1: source                                                      #
        # ------------------------------------------------------------------ #
        self.pipeline.add_stage(
            stage_name="GetSourceCode",
            actions=[
                actions.GitHubSourceAction(
                    action_name="CheckoutGithubSource",
                    owner=github_owner,
                    repo=github_repo,
                    branch=github_branch,
                    oauth_token=cdk.SecretValue.secrets_manager(
                        oauth_token_secret_arn
                    ),
                    output=source_output,
                )
            ],
        )

        # ------------------------------------------------------------------ #
        # Stage 2: build                                                       #
        # ------------------------------------------------------------------ #
        self.build_project = codebuild.PipelineProject(
            self,
            "BuildWebApp",
            project_name=build_project_name,
            build_spec=codebuild.BuildSpec.from_object(
                make_build_spec(app_dir, bundle_dir, node_version)
            ),
            environment=codebuild.BuildEnvironment(
                build_image=codebuild.LinuxBuildImage.STANDARD_5_0,
            ),
        )
        self.pipeline.add_stage(
            stage_name="BuildApp",
            actions=[
                actions.CodeBuildAction(
                    action_name="BuildApp",
                    project=self.build_project,
                    input=source_output,
                    outputs=[build_output],
                )
            ],
        )

        # ------------------------------------------------------------------ #
        # Stage 3: deploy                                                      #
        # ------------------------------------------------------------------ #
        self.application = codedeploy.ServerApplication(
            self,
            "Ec2ServerApplication",
            application_name=application_name,
        )
        self.deployment_group = codedeploy.ServerDeploymentGroup(
            self,
            "DeploymentGroup",
            deployment_group_name=deployment_group_name,
            application=self.application,
            ec2_instance_tags=codedeploy.InstanceTagSet(
                {deploy_tag_key: [deploy_tag_value]}
            ),
            deployment_config=codedeploy.ServerDeploymentConfig.ONE_AT_A_TIME,
            install_agent=True,
        )
        self.pipeline.add_stage(
            stage_name="DeployWebappToEC2",
            actions=[
                actions.CodeDeployServerDeployAction(
                    action_name="DeployWebAppToEC2",
                    input=build_output,
                    deployment_group=self.deployment_group,
                )
            ],
        )

        # ------------------------------------------------------------------ #
        # Outputs                                                              #
        # ------------------------------------------------------------------ #
        cdk.CfnOutput(self, "PipelineName", value=self.pipeline.pipeline_name)
        cdk.CfnOutput(
            self,
            "ArtifactBucketName",
            value=self.pipeline.artifact_bucket.bucket_name,
        )
