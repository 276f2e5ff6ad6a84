"""
ComputeStack — EC2 web server.

Instance
  Type:     t2.micro (per-environment size from settings)
  AMI:      Amazon Linux 2 (latest)
  Subnet:   Public, fronted by the ALB and reachable over SSH
  Key pair: created here; private key lands in SSM Parameter Store
  UserData: CodeDeploy agent + AWS CLI so the pipeline can deploy to it
  EIP:      Elastic IP attached to the instance
"""
import aws_cdk as cdk
from aws_cdk import aws_ec2 as ec2
from constructs import Construct


def codedeploy_agent_commands(region: str) -> list[str]:
    """Download and run the CodeDeploy agent installer for ``region``."""
    bucket = f"aws-codedeploy-{region}"
    return [
        "cd /home/ec2-user",
        f"wget https://{bucket}.s3.{region}.amazonaws.com/latest/install",
        "sudo chmod +x ./install",
        "sudo ./install auto",
    ]


def bootstrap_commands(region: str) -> list[str]:
    return [
        "sudo yum update -y",
        "sudo yum -y install ruby",
        "sudo yum -y install wget",
        *codedeploy_agent_commands(region),
        "sudo yum install -y python-pip",
        "sudo pip install awscli",
    ]


class ComputeStack(cdk.Stack):
    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        vpc: ec2.Vpc,
        sg_web: ec2.SecurityGroup,
        env_name: str,
        instance_type: str,
        key_pair_name: str,
        region: str,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # ------------------------------------------------------------------ #
        # Key pair                                                             #
        # ------------------------------------------------------------------ #
        self.key_pair = ec2.KeyPair(
            self,
            "WebAppKeyPair",
            key_pair_name=key_pair_name,
        )

        # ------------------------------------------------------------------ #
        # EC2 Instance                                                         #
        # ------------------------------------------------------------------ #
        self.instance = ec2.Instance(
            self,
            "WebAppInstance",
            instance_name=f"webapp-{env_name}-instance",
            instance_type=ec2.InstanceType(instance_type),
            machine_image=ec2.MachineImage.latest_amazon_linux2(),
            vpc=vpc,
            vpc_subnets=ec2.SubnetSelection(subnet_type=ec2.SubnetType.PUBLIC),
            security_group=sg_web,
            key_pair=self.key_pair,
        )
        self.instance.add_user_data(*bootstrap_commands(region))

        # ------------------------------------------------------------------ #
        # Elastic IP                                                           #
        # ------------------------------------------------------------------ #
        self.elastic_ip = ec2.CfnEIP(
            self,
            "WebAppElasticIp",
            instance_id=self.instance.instance_id,
        )

        # ------------------------------------------------------------------ #
        # Outputs                                                              #
        # ------------------------------------------------------------------ #
        cdk.CfnOutput(self, "InstanceId", value=self.instance.instance_id)
        cdk.CfnOutput(self, "ElasticIp", value=self.elastic_ip.ref)
        cdk.CfnOutput(
            self,
            "KeyPairParameterName",
            value=self.key_pair.private_key.parameter_name,
        )
