import asyncio
import functools
import pathlib
import click
from .boot import init_blobfs
from .exceptions import BlobFSError
from .store import build_file_store


def _with_store(cb):
    """Run the async command with a configured store and close it afterwards."""

    @functools.wraps(cb)
    def _inner(*args, **kwargs):

        async def _run():
            async with build_file_store() as store:
                return await cb(store, *args, **kwargs)

        try:
            return asyncio.run(_run())
        except BlobFSError as ex:
            raise click.ClickException(str(ex)) from ex

    return _inner


@click.group
def main():
    init_blobfs("cli")


@main.command
@click.argument("path", default="")
@click.option("--markers", is_flag=True, help="Show directory marker blobs")
@_with_store
async def ls(store, path, markers):
    for entry in await store.list_directory(path, include_markers=markers):
        if entry.is_directory:
            click.echo(f"{'<DIR>':>12}  {'':25}  {entry.path}/")
        else:
            modified = entry.last_modified.isoformat() if entry.last_modified else ""
            click.echo(f"{entry.length:>12}  {modified:25}  {entry.path}")


@main.command
@click.argument("path")
@_with_store
async def stat(store, path):
    entry = await store.get_file_info(path)
    if entry is None:
        entry = await store.get_directory_info(path)
    if entry is None:
        raise click.ClickException(f"[{path}] not found")
    click.echo(f"path: {entry.path}")
    click.echo(f"type: {'directory' if entry.is_directory else 'file'}")
    click.echo(f"size: {entry.length}")
    click.echo(f"modified: {entry.last_modified.isoformat() if entry.last_modified else ''}")


@main.command
@click.argument("path")
@_with_store
async def mkdir(store, path):
    await store.create_directory(path)


@main.command
@click.argument("path")
@_with_store
async def rmdir(store, path):
    if not await store.delete_directory(path):
        click.echo(f"Nothing to delete under [{path}]")


@main.command
@click.argument("path")
@_with_store
async def rm(store, path):
    if not await store.delete_file(path):
        click.echo(f"[{path}] does not exist")


@main.command
@click.argument("local_file", type=click.Path(exists=True, dir_okay=False, path_type=pathlib.Path))
@click.argument("path")
@click.option("--overwrite", is_flag=True)
@_with_store
async def put(store, local_file, path, overwrite):
    with open(local_file, "rb") as h:
        await store.create_file(path, h, overwrite=overwrite)


@main.command
@click.argument("path")
@click.argument("local_file", type=click.Path(dir_okay=False, path_type=pathlib.Path))
@click.option("--overwrite", is_flag=True)
@_with_store
async def get(store, path, local_file, overwrite):
    if local_file.exists() and not overwrite:
        raise click.ClickException(f"[{local_file}] already exists")
    stream = await store.open_read_stream(path)
    try:
        with open(local_file, "wb") as h:
            async for chunk in stream.chunks():
                h.write(chunk)
    except Exception:
        local_file.unlink(True)
        raise


@main.command
@click.argument("source")
@click.argument("target")
@_with_store
async def cp(store, source, target):
    await store.copy_file(source, target)


@main.command
@click.argument("source")
@click.argument("target")
@_with_store
async def mv(store, source, target):
    await store.move_file(source, target)
