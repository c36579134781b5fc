"""Entry point for python -m py_batch_resize_mcp.

不带参数时启动 MCP 服务器；``resize`` 子命令直接在本地批量缩放。
"""

import argparse
import sys


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="py-batch-resize-mcp",
        description="批量缩放图片并打包为 ZIP 归档",
    )
    parser.add_argument("-v", "--version", action="store_true", help="显示版本号")

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("serve", help="启动 MCP 服务器（默认）")

    resize = subparsers.add_parser("resize", help="缩放本地图片文件或目录")
    resize.add_argument("input_path", help="图片文件或目录")
    resize.add_argument("-o", "--output", default=None, help="归档输出路径或目录")
    resize.add_argument("--width", type=int, default=None, help="目标宽度 100-2000")
    resize.add_argument("--height", type=int, default=None, help="目标高度 100-2000")
    resize.add_argument(
        "--stretch",
        action="store_true",
        help="拉伸到目标框，不保持原始宽高比",
    )
    resize.add_argument("-r", "--recursive", action="store_true", help="递归子目录")
    return parser


def _run_resize(args: argparse.Namespace) -> int:
    from .exceptions import ResizeError
    from .resizer import resize_path
    from .utils import configure_logging

    configure_logging()

    def show_progress(event) -> None:
        print(f"\r处理中 ({event.percent}%)", end="", file=sys.stderr, flush=True)

    try:
        result = resize_path(
            args.input_path,
            output_path=args.output,
            width=args.width,
            height=args.height,
            preserve_aspect_ratio=not args.stretch,
            recursive=args.recursive,
            progress_callback=show_progress,
        )
    except ResizeError as e:
        print(f"\n错误: {e.message}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"\n错误: {e}", file=sys.stderr)
        return 1

    print(file=sys.stderr)
    print(result.get_summary())
    print(result.archive_path)
    for identifier in result.failed_identifiers:
        print(f"失败: {identifier}", file=sys.stderr)
    return 0


def main(argv: list[str] | None = None) -> int:
    """主入口函数"""
    args = _build_parser().parse_args(argv)

    # 检查版本信息
    if args.version:
        from . import __version__

        print(f"py-batch-resize-mcp {__version__}")
        return 0

    if args.command == "resize":
        return _run_resize(args)

    # 启动 MCP 服务器
    from .mcp_server import main as server_main

    server_main()
    return 0


if __name__ == "__main__":
    sys.exit(main())
