"""
NetworkStack — VPC, public subnets, shared web security group.

Topology
--------
  VPC CIDR:  10.0.0.0/16 (configurable)
  Public subnets (up to 3 AZs, /24): EC2 web server, ALB
  No NAT gateways: nothing runs in private subnets

Security group
  ec2-sg-<env>  inbound 22, 80, 443 from 0.0.0.0/0; egress unrestricted
                shared by the web server and the ALB
"""
import aws_cdk as cdk
from aws_cdk import aws_ec2 as ec2
from constructs import Construct

PUBLIC_PORTS = (
    (22, "Allow public SSH access to the web app instance."),
    (80, "Allow public HTTP access to the web app instance."),
    (443, "Allow public HTTPS access to the web app instance."),
)


class NetworkStack(cdk.Stack):
    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        env_name: str,
        vpc_cidr: str = "10.0.0.0/16",
        max_azs: int = 3,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # ------------------------------------------------------------------ #
        # VPC                                                                  #
        # ------------------------------------------------------------------ #
        self.vpc = ec2.Vpc(
            self,
            "Vpc",
            ip_addresses=ec2.IpAddresses.cidr(vpc_cidr),
            max_azs=max_azs,
            nat_gateways=0,
            subnet_configuration=[
                ec2.SubnetConfiguration(
                    name=f"public-subnet-{env_name}",
                    subnet_type=ec2.SubnetType.PUBLIC,
                    cidr_mask=24,
                ),
            ],
        )

        # ------------------------------------------------------------------ #
        # Security Group                                                       #
        # ------------------------------------------------------------------ #
        self.sg_web = ec2.SecurityGroup(
            self,
            "Ec2Sg",
            vpc=self.vpc,
            security_group_name=f"ec2-sg-{env_name}",
            description="Web app - inbound SSH, HTTP and HTTPS from internet",
            allow_all_outbound=True,
        )
        for port, description in PUBLIC_PORTS:
            self.sg_web.connections.allow_from_any_ipv4(ec2.Port.tcp(port), description)

        # ------------------------------------------------------------------ #
        # Outputs                                                              #
        # ------------------------------------------------------------------ #
        cdk.CfnOutput(self, "VpcId", value=self.vpc.vpc_id)
        cdk.CfnOutput(
            self,
            "PublicSubnetIds",
            value=",".join(s.subnet_id for s in self.vpc.public_subnets),
        )
        cdk.CfnOutput(self, "SgWebId", value=self.sg_web.security_group_id)
