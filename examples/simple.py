from bindery import Application, Command, CommandBuilder
from bindery.console import console
from bindery.utils import setup_logging

setup_logging()


class Deploy(Command):
    async def run(self, signal):
        console.print(f"Deploying [bold]{self.name}[/bold] x{self.count}")


app = Application(program="simple", description="Deploy demo", version="0.1.0")
app.add_command(
    CommandBuilder("deploy", Deploy, description="Deploy a service", aliases=["d"])
    .option("-n", "--name", required=True, env="DEPLOY_NAME", description="Service name")
    .argument("count", type=int, default=0, description="Number of instances")
)

# python simple.py deploy --name svc 3
if __name__ == "__main__":
    app.run()
