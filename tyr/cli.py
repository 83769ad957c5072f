"""Thin CLI wrapper for tyr.

This module provides the command-line interface using Typer.
All business logic is delegated to core modules; this layer loads the
configuration once per invocation and converts errors into exit code 1.
"""

import json
import logging
from dataclasses import asdict
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from tyr import __version__
from tyr.config import TyrConfig, config_to_json, get_settings, load_config, set_config
from tyr.errors import SubprocessFailureError, TyrError, UnsupportedFamilyError
from tyr.types import Family

app = typer.Typer(
    name="tyr",
    help="Tyr - manage the firmware lifecycle of IoT device families",
    no_args_is_help=True,
)
console = Console(soft_wrap=True)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"tyr version {__version__}")
        raise typer.Exit()


def configure_logging(level: str) -> None:
    """Route log records to stderr through rich."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def print_error(e: TyrError) -> None:
    """Print a tyr error, including captured output of failed commands."""
    if isinstance(e, SubprocessFailureError):
        console.print(f"Command failed: {e.message}", style="red", markup=False)
        if e.stdout:
            console.print(f"Command output: {e.stdout}", markup=False)
        if e.stderr:
            console.print(f"Command error: {e.stderr}", markup=False)
        return
    console.print(f"Error: {e.message}", style="red", markup=False)


def require_family(config: TyrConfig, family: Family) -> None:
    """Ensure the configured family supports the requested operation."""
    if config.family is not family:
        raise UnsupportedFamilyError(f"Family {config.family.value} not supported")


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Tyr - manage the firmware lifecycle of IoT device families."""
    try:
        settings = get_settings()
    except ValidationError as e:
        console.print("Invalid TYR_* environment settings:", style="red")
        console.print(str(e), markup=False)
        raise typer.Exit(code=1) from None
    configure_logging(settings.log_level)


@app.command("get-config")
def get_config(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Show the stored configuration."""
    try:
        config = load_config()
    except TyrError as e:
        print_error(e)
        raise typer.Exit(code=1) from None

    if json_output:
        console.print(config_to_json(config), markup=False)
        return

    console.print("[bold]Configuration:[/bold]")
    console.print(f"  Family:        {config.family.value}")
    console.print()
    console.print("[bold]Arduino:[/bold]")
    console.print(f"  CLI path:      {config.arduino.cli_path}", markup=False)
    console.print(f"  Board type:    {config.arduino.board_type}", markup=False)
    console.print(f"  Sketch path:   {config.arduino.sketch_path}", markup=False)
    console.print(f"  Devices path:  {config.arduino.devices_path}", markup=False)


@app.command("set-config")
def set_config_command(
    family: Annotated[
        Family,
        typer.Option("--family", help="Device family", case_sensitive=False),
    ],
    arduino_board_type: Annotated[
        str | None,
        typer.Option("--arduino-board-type", help="Arduino board FQBN"),
    ] = None,
    arduino_sketch_path: Annotated[
        str | None,
        typer.Option("--arduino-sketch-path", help="Path to the sketch to compile"),
    ] = None,
    arduino_devices_path: Annotated[
        str | None,
        typer.Option(
            "--arduino-devices-path", help="Root of per-device descriptors and images"
        ),
    ] = None,
) -> None:
    """Set the device family and per-family settings.

    Options that are not given keep their stored value.
    """
    try:
        set_config(
            family,
            board_type=arduino_board_type,
            sketch_path=arduino_sketch_path,
            devices_path=arduino_devices_path,
        )
    except TyrError as e:
        print_error(e)
        raise typer.Exit(code=1) from None
    console.print(f"[green]Configuration updated (family: {family.value})[/green]")


bootstrap_app = typer.Typer(help="Bootstrap phase of the firmware lifecycle")
app.add_typer(bootstrap_app, name="bootstrap")


@bootstrap_app.command("list-devices")
def bootstrap_list_devices() -> None:
    """Show devices that have a descriptor."""
    from tyr.devices.io import list_device_ids

    try:
        config = load_config()
    except TyrError as e:
        print_error(e)
        raise typer.Exit(code=1) from None

    device_ids = list_device_ids(config.arduino.devices_path)
    if not device_ids:
        console.print("[yellow]No devices found[/yellow]")
        return
    console.print(f"[bold]Found {len(device_ids)} device(s):[/bold]")
    for device_id in device_ids:
        console.print(f"  {device_id}", markup=False)


@bootstrap_app.command("create-device")
def bootstrap_create_device() -> None:
    """Create a new device."""
    try:
        config = load_config()
    except TyrError as e:
        print_error(e)
        raise typer.Exit(code=1) from None
    console.print(
        f"Bootstrapping {config.family.value}: create-device is not implemented yet"
    )


provision_app = typer.Typer(help="Provisioning phase of the firmware lifecycle")
app.add_typer(provision_app, name="provision")


@provision_app.command("list-devices")
def provision_list_devices() -> None:
    """Show devices and the networks declared in their descriptors."""
    from tyr.devices.io import descriptor_path, list_device_ids, load_descriptor

    try:
        config = load_config()
    except TyrError as e:
        print_error(e)
        raise typer.Exit(code=1) from None

    devices_path = config.arduino.devices_path
    device_ids = list_device_ids(devices_path)
    if not device_ids:
        console.print("[yellow]No devices found[/yellow]")
        return

    for device_id in device_ids:
        console.print(f"[green]{device_id}[/green]")
        try:
            descriptor = load_descriptor(
                device_id, descriptor_path(devices_path, device_id)
            )
        except TyrError as e:
            console.print(f"    {e.message}", style="yellow", markup=False)
            continue
        for index, network in enumerate(descriptor.networks):
            name = network.get("name") or f"network {index}"
            settings = network.get("config")
            if not isinstance(settings, list):
                console.print(f"    {name} (no settings yet)", markup=False)
                continue
            console.print(f"    {name} ({len(settings)} setting(s))", markup=False)


@provision_app.command("add-network")
def provision_add_network(
    device_service_tag: Annotated[str, typer.Argument(help="Device service tag")],
    network_name: Annotated[str, typer.Argument(help="The network name")],
) -> None:
    """Provision a new network."""
    console.print(
        f"Adding network {network_name!r} to device {device_service_tag!r} "
        "is not implemented yet",
        markup=False,
    )


manufacture_app = typer.Typer(help="Manufacturing phase of the firmware lifecycle")
app.add_typer(manufacture_app, name="manufacture")


@manufacture_app.command("list-images")
def manufacture_list_images(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Show available device images."""
    from tyr.images import discover_images

    try:
        config = load_config()
    except TyrError as e:
        print_error(e)
        raise typer.Exit(code=1) from None

    images = discover_images(config.arduino.devices_path)

    if json_output:
        console.print(json.dumps([asdict(i) for i in images], indent=2), markup=False)
        return

    if not images:
        console.print("[yellow]No images found[/yellow]")
        return

    console.print(f"[bold]Found {len(images)} image(s):[/bold]")
    for image in images:
        console.print(
            f"  {image.device_id}/{image.filename} "
            f"({image.kind}, {image.size_bytes} bytes, sha256 {image.sha256[:16]})",
            markup=False,
        )


@manufacture_app.command("create-image")
def manufacture_create_image(
    device_id: Annotated[str, typer.Argument(help="Device ID")],
    deveui: Annotated[
        str | None,
        typer.Option("--deveui", help="LoRaWAN DevEUI (16 hex characters)"),
    ] = None,
    appeui: Annotated[
        str | None,
        typer.Option("--appeui", help="LoRaWAN AppEUI (16 hex characters)"),
    ] = None,
    appkey: Annotated[
        str | None,
        typer.Option("--appkey", help="LoRaWAN AppKey (32 hex characters)"),
    ] = None,
) -> None:
    """Create a new firmware image for a device."""
    from tyr.arduino.credentials import LoRaWANCredentials, validate_credentials
    from tyr.arduino.toolchain import check_toolchain_install, compile_image

    try:
        config = load_config()
        require_family(config, Family.ARDUINO)

        credentials = None
        if any(v is not None for v in (deveui, appeui, appkey)):
            credentials = LoRaWANCredentials(
                deveui=deveui or "",
                appeui=appeui or "",
                appkey=appkey or "",
            )
            validate_credentials(credentials)

        check_toolchain_install(config.arduino)
        console.print(f"Creating image for device {device_id}", markup=False)
        result = compile_image(config.arduino, device_id, credentials)
    except TyrError as e:
        print_error(e)
        raise typer.Exit(code=1) from None

    if result.stdout:
        console.print(result.stdout, markup=False)
    console.print(f"[green]Image created for device {device_id}[/green]")


@manufacture_app.command("list-devices")
def manufacture_list_devices() -> None:
    """Show connected devices."""
    from tyr.arduino.toolchain import check_toolchain_install, list_boards

    try:
        config = load_config()
        require_family(config, Family.ARDUINO)
        check_toolchain_install(config.arduino)
        result = list_boards(config.arduino)
    except TyrError as e:
        print_error(e)
        raise typer.Exit(code=1) from None

    console.print(result.stdout, markup=False)


@manufacture_app.command("flash-device")
def manufacture_flash_device(
    device_service_tag: Annotated[str, typer.Argument(help="Device service tag")],
    firmware_image_version: Annotated[
        str, typer.Argument(help="Firmware image version")
    ],
) -> None:
    """Flash a device."""
    console.print(
        f"Flashing device {device_service_tag!r} with version "
        f"{firmware_image_version!r} is not implemented yet",
        markup=False,
    )


@manufacture_app.command("upload-image")
def manufacture_upload_image(
    device_service_tag: Annotated[str, typer.Argument(help="Device service tag")],
    firmware_image_version: Annotated[
        str, typer.Argument(help="Firmware image version")
    ],
) -> None:
    """Upload a firmware image."""
    console.print(
        f"Uploading image {device_service_tag!r} with version "
        f"{firmware_image_version!r} is not implemented yet",
        markup=False,
    )


if __name__ == "__main__":
    app()
