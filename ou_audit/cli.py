from __future__ import annotations

import argparse
import getpass
import sys
from typing import IO, Callable, Optional, Sequence

import colorama

from . import __version__
from .ad import ADClient, ADConfig, Credentials, resolve_dc_config
from .env_settings import get_env
from .errors import AuditError
from .log_config import setup_logging
from .schema import build_params
from .services.audit import Directory, run_audit
from .services.export import export_findings, print_report
from .utils.tcp_probe import tcp_probe


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="ou-audit",
        description="Поиск ACE с правами GenericAll / CreateChild на OU Active Directory.",
    )
    p.add_argument("ou_name", help="Имя OU или шаблон с '*' (например 'Sales*')")
    p.add_argument("-d", "--remote-domain", default="", help="Удалённый домен (требует --remote-dc-ip)")
    p.add_argument("-i", "--remote-dc-ip", default="", help="IP-адрес контроллера удалённого домена")
    p.add_argument("-u", "--username", default="", help="Пользователь для bind в удалённом домене")
    p.add_argument("-e", "--export", action="store_true", help="Сохранить результаты в CSV")
    p.add_argument("--xlsx", action="store_true", help="Дополнительно сохранить результаты в XLSX")
    p.add_argument("-o", "--output-dir", default="", help="Каталог для файлов экспорта")
    p.add_argument("--log-file", default="", help="Писать лог в файл")
    p.add_argument("-v", "--verbose", action="store_true", help="Подробный лог (DEBUG)")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def prompt_credentials(domain: str, username: str = "") -> Credentials:
    user = (username or "").strip()
    if not user:
        user = input(f"Пользователь ({domain}): ").strip()
    password = getpass.getpass(f"Пароль для {user}: ")
    return Credentials(username=user, password=password, domain=domain)


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    directory_factory: Callable[[ADConfig], Directory] = ADClient,
    probe: Callable[[str, int, float], bool] = tcp_probe,
    stdout: Optional[IO[str]] = None,
) -> int:
    args = build_parser().parse_args(argv)
    env = get_env()
    out = stdout or sys.stdout

    log = setup_logging(
        level="DEBUG" if args.verbose else env.log_level,
        log_file=args.log_file or env.log_file,
    )
    colorama.just_fix_windows_console()

    try:
        params = build_params(
            ou_name=args.ou_name,
            remote_domain=args.remote_domain,
            remote_dc_ip=args.remote_dc_ip,
            export_csv=args.export,
            export_xlsx=args.xlsx,
            output_dir=args.output_dir or env.export_dir,
        )
        if params.remote_dc_ip and not params.is_remote:
            log.warning("--remote-dc-ip указан без --remote-domain и будет проигнорирован")

        cfg = resolve_dc_config(params, env)
        directory = directory_factory(cfg)

        provider = None
        if params.is_remote:
            provider = lambda: prompt_credentials(params.remote_domain, args.username)  # noqa: E731

        report = run_audit(params, directory, log=log, credential_provider=provider, probe=probe, env=env)

        print_report(report, out, color=out.isatty())

        if params.export_csv or params.export_xlsx:
            for path in export_findings(
                report.findings,
                params.output_dir,
                to_csv=params.export_csv,
                to_xlsx=params.export_xlsx,
            ):
                log.info("Результаты сохранены: %s", path)

    except AuditError as e:
        log.error("Аудит прерван (%s): %s", type(e).__name__, e)
        return 1
    except KeyboardInterrupt:
        log.error("Аудит прерван пользователем")
        return 1
    except Exception:
        log.exception("Непредвиденная ошибка, аудит прерван")
        return 1

    if report.has_findings:
        log.warning("Аудит завершён: найдено %d опасных ACE", len(report.findings))
    else:
        log.info("Аудит завершён: опасных ACE не найдено")
    return 0

