"""
wxrestore 命令行界面

提供 restore 命令，从解包目录还原小程序配置文件。
"""

import os
import sys
import logging
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from . import __version__
from .restorer import ConfigRestorer, ParserError


console = Console()


def setup_logging(verbose: bool) -> None:
    """将日志输出到 rich 控制台"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True
    )


@click.group()
@click.version_option(version=__version__, prog_name="wxrestore")
def cli():
    """wxrestore - 微信小程序配置还原工具"""
    pass


@cli.command()
@click.option(
    '-i', '--input',
    required=True,
    help='解包后的小程序目录或 app-config.json 路径'
)
@click.option(
    '-o', '--output',
    default=None,
    help='输出目录 (默认写回 app-config.json 所在目录)'
)
@click.option(
    '-v', '--verbose',
    is_flag=True,
    default=False,
    help='输出调试日志'
)
def restore(input: str, output: Optional[str], verbose: bool):
    """还原 app.json、页面配置与 ext.json"""

    setup_logging(verbose)

    if not os.path.exists(input):
        console.print(f"[red]错误: 路径不存在: {input}[/red]")
        sys.exit(1)

    restorer = ConfigRestorer(input)

    if not restorer.config_path.exists():
        console.print(f"[red]错误: 未找到 {restorer.config_path.name}[/red]")
        sys.exit(1)

    console.print(f"[cyan]配置文件: {restorer.config_path}[/cyan]")

    try:
        configs = restorer.restore()
        count = restorer.save(output)
    except (ParserError, OSError) as e:
        console.print(f"[red]配置还原失败: {escape(str(e))}[/red]")
        sys.exit(1)

    console.print(f"[green]✓ 配置还原完成: {count} 个配置文件[/green]")

    for path in list(configs.keys())[:10]:
        console.print(f"  [dim]{path}[/dim]")
    if len(configs) > 10:
        console.print(f"  [dim]... 及其他 {len(configs) - 10} 个文件[/dim]")

    console.print(f"[cyan]输出目录: {output or restorer.base_dir}[/cyan]")


def main():
    """主入口"""
    cli()


if __name__ == '__main__':
    main()
