from provisioner.main import cli

cli(prog_name="provision")
