"""CDK stacks for the web app deployment."""
