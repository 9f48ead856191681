import argparse
import logging
from typing import List, Optional

from pulumi import automation as auto
import pulumi
import pulumi_aws as aws
import pulumi_docker as docker

from fibcalc import Strategy

# Set up logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

PROJECT_NAME = "fibfactory"
REGION = "us-west-2"
IMAGE_REPOSITORY = "public.ecr.aws/o2l3o3x9/adamgordonbell"
DEFAULT_PORT = 8080


def stack_name_for(env_id: str) -> str:
    return f"{PROJECT_NAME}-{env_id}"


def pulumi_program() -> None:
    config = pulumi.Config()
    app_name = config.require("appName")
    container_port = config.require_int("containerPort")
    strategy = config.get("strategy") or Strategy.MEMOIZED.value

    aws_provider = aws.Provider("aws-provider", region=REGION)

    # Build the calculator service and push it to ECR Public
    image = docker.Image("app-image",
        build=docker.DockerBuildArgs(
            context=".",
            platform="linux/amd64"
        ),
        image_name=f"{IMAGE_REPOSITORY}:{app_name}",
        registry=docker.RegistryArgs(
            server="public.ecr.aws"
        ),
        opts=pulumi.ResourceOptions(provider=aws_provider)
    )

    app_runner_service = aws.apprunner.Service("app-runner-service",
        service_name=f"{app_name}-service",
        source_configuration=aws.apprunner.ServiceSourceConfigurationArgs(
            auto_deployments_enabled=False,
            image_repository=aws.apprunner.ServiceSourceConfigurationImageRepositoryArgs(
                image_configuration=aws.apprunner.ServiceSourceConfigurationImageRepositoryImageConfigurationArgs(
                    port=str(container_port),
                    runtime_environment_variables={
                        "FIB_STRATEGY": strategy,
                        "PORT": str(container_port),
                    },
                ),
                image_identifier=image.image_name,
                image_repository_type="ECR_PUBLIC"
            )
        ),
        health_check_configuration=aws.apprunner.ServiceHealthCheckConfigurationArgs(
            protocol="HTTP",
            path="/health",
        ),
        instance_configuration=aws.apprunner.ServiceInstanceConfigurationArgs(
            cpu="1024",
            memory="2048"
        ),
        opts=pulumi.ResourceOptions(provider=aws_provider, depends_on=[image])
    )

    pulumi.export("app_runner_service_url", app_runner_service.service_url)
    pulumi.export("strategy", strategy)


def create_env(env_id: str, strategy: str = Strategy.MEMOIZED.value) -> Optional[str]:
    stack_name = stack_name_for(env_id)

    try:
        stack = auto.create_or_select_stack(stack_name=stack_name,
                                            project_name=PROJECT_NAME,
                                            program=pulumi_program)

        logger.info(f"Successfully initialized stack {stack_name}")

        stack.set_config("appName", auto.ConfigValue(value=f"fib-app-{env_id}"))
        stack.set_config("containerPort", auto.ConfigValue(value=str(DEFAULT_PORT)))
        stack.set_config("strategy", auto.ConfigValue(value=strategy))

        logger.info(f"Config set (strategy={strategy})")

        logger.info("Deploying the stack...")
        up_res = stack.up(on_output=lambda msg: logger.info(msg))

        url_output = up_res.outputs.get('app_runner_service_url')
        service_url = url_output.value if url_output else None

        logger.info(f"Stack {stack_name} created successfully")
        logger.info(f"Service URL: {service_url}")
        return service_url
    except Exception as e:
        logger.error(f"Error creating stack: {str(e)}", exc_info=True)
        raise


def destroy_env(env_id: str) -> None:
    stack_name = stack_name_for(env_id)

    try:
        stack = auto.select_stack(stack_name=stack_name,
                                  project_name=PROJECT_NAME,
                                  program=pulumi_program)

        logger.info(f"Destroying stack {stack_name}")

        destroy_result = stack.destroy(on_output=lambda msg: logger.info(msg))

        if destroy_result.summary.resource_changes:
            logger.info(f"Resources destroyed: {destroy_result.summary.resource_changes}")

        logger.info(f"Stack {stack_name} destroyed successfully")

        stack.workspace.remove_stack(stack_name)

        logger.info(f"Stack {stack_name} removed completely")
    except auto.errors.StackNotFoundError:
        logger.error(f"Stack {stack_name} not found. It may have already been destroyed.")
    except Exception as e:
        logger.error(f"Error destroying stack: {str(e)}", exc_info=True)


def list_envs() -> None:
    try:
        workspace = auto.LocalWorkspace(project_settings=auto.ProjectSettings(name=PROJECT_NAME, runtime="python"))
        stacks = [stack for stack in workspace.list_stacks() if stack.name.startswith(PROJECT_NAME)]
        print("Active environments:")
        for stack in stacks:
            print(f"- {stack.name}")
        if not stacks:
            print("No active environments found.")
    except Exception as e:
        logger.error(f"Error listing environments: {str(e)}", exc_info=True)


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Manage Fibonacci calculator environments")
    parser.add_argument("action", choices=["create", "destroy", "list"], help="Action to perform")
    parser.add_argument("--env-id", help="Environment ID (required for create and destroy)")
    parser.add_argument("--strategy", choices=[s.value for s in Strategy], default=Strategy.MEMOIZED.value,
                        help="Calculation strategy served by the environment")

    args = parser.parse_args(argv)

    if args.action in ("create", "destroy") and not args.env_id:
        print(f"Error: --env-id is required for {args.action} action")
    elif args.action == "create":
        create_env(args.env_id, args.strategy)
    elif args.action == "destroy":
        destroy_env(args.env_id)
    elif args.action == "list":
        list_envs()


if __name__ == "__main__":
    main()
