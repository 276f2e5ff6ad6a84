"""
LoadBalancerStack — internet-facing Application Load Balancer.

ALB
  Subnets:         Public
  Security group:  shared web SG from NetworkStack
  Listeners (certificate configured):
    HTTP:80   → permanent redirect to HTTPS:443
    HTTPS:443 → target group (EC2:80)
  Listeners (no certificate):
    HTTP:80   → target group (EC2:80)
  Health check: HTTP GET / on the traffic port

Note: ACM_CERTIFICATE_ARN must live in the same region as the ALB.
"""
import logging

import aws_cdk as cdk
from aws_cdk import aws_certificatemanager as acm
from aws_cdk import aws_ec2 as ec2
from aws_cdk import aws_elasticloadbalancingv2 as elbv2
from aws_cdk import aws_elasticloadbalancingv2_targets as elbv2_targets
from constructs import Construct

logger = logging.getLogger(__name__)


class LoadBalancerStack(cdk.Stack):
    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        vpc: ec2.Vpc,
        sg_web: ec2.SecurityGroup,
        app_instance: ec2.Instance,
        load_balancer_name: str,
        acm_cert_arn: str,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # ------------------------------------------------------------------ #
        # Application Load Balancer                                            #
        # ------------------------------------------------------------------ #
        self.alb = elbv2.ApplicationLoadBalancer(
            self,
            "LoadBalancer",
            load_balancer_name=load_balancer_name,
            vpc=vpc,
            internet_facing=True,
            security_group=sg_web,
            vpc_subnets=ec2.SubnetSelection(subnet_type=ec2.SubnetType.PUBLIC),
        )

        # Target group → EC2 port 80
        self.target_group = elbv2.ApplicationTargetGroup(
            self,
            "WebAppTargetGroup",
            vpc=vpc,
            protocol=elbv2.ApplicationProtocol.HTTP,
            target_type=elbv2.TargetType.INSTANCE,
            targets=[elbv2_targets.InstanceTarget(app_instance)],
            health_check=elbv2.HealthCheck(
                protocol=elbv2.Protocol.HTTP,
                path="/",
            ),
        )

        if acm_cert_arn:
            self._add_https_listeners(acm_cert_arn)
        else:
            logger.warning(
                "ACM_CERTIFICATE_ARN is not set: %s serves plain HTTP on port 80",
                construct_id,
            )
            self.alb.add_listener(
                "HttpListener",
                protocol=elbv2.ApplicationProtocol.HTTP,
                open=True,
                default_target_groups=[self.target_group],
            )

        # ------------------------------------------------------------------ #
        # Outputs                                                              #
        # ------------------------------------------------------------------ #
        cdk.CfnOutput(self, "AlbDnsName", value=self.alb.load_balancer_dns_name)

    def _add_https_listeners(self, acm_cert_arn: str) -> None:
        certificate = acm.Certificate.from_certificate_arn(
            self, "WebAppCertificate", acm_cert_arn
        )

        # HTTP listener: redirect everything to HTTPS
        http_listener = self.alb.add_listener(
            "HttpListener",
            protocol=elbv2.ApplicationProtocol.HTTP,
            open=True,
        )
        http_listener.add_action(
            "HttpRedirectAction",
            action=elbv2.ListenerAction.redirect(
                permanent=True,
                port="443",
                protocol="HTTPS",
            ),
        )

        https_listener = self.alb.add_listener(
            "HttpsListener",
            protocol=elbv2.ApplicationProtocol.HTTPS,
            open=True,
            certificates=[elbv2.ListenerCertificate.from_certificate_manager(certificate)],
        )
        https_listener.add_target_groups(
            "HttpsTargetGroups",
            target_groups=[self.target_group],
        )
