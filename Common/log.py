import logging
import datetime
import os
import sys

_LEVELS = {
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}


class Log:
    def __init__(self, log_dir="Log", console=True):
        # 프로그램 실행 폴더
        if getattr(sys, 'frozen', False):
            program_dir = os.path.dirname(os.path.abspath(sys.executable))
        else:
            program_dir = os.path.dirname(os.path.abspath(sys.argv[0] or __file__))

        self.log_dir = os.path.join(program_dir, log_dir)
        os.makedirs(self.log_dir, exist_ok=True)  # 디렉토리가 없으면 생성
        self.console = console

        # 로그 파일 경로 설정 (파일명은 'Log_YYYYMMDD.log' 형식)
        self.log_file = os.path.join(self.log_dir, f'Log_{self._current_date_str()}.log')

        # 토폴로지 엔진 전용 로거에 파일 핸들러를 한 번만 연결합니다.
        self._logger = logging.getLogger("topojson")
        self._logger.setLevel(logging.DEBUG)
        if not any(getattr(h, "baseFilename", None) == os.path.abspath(self.log_file) for h in self._logger.handlers):
            handler = logging.FileHandler(self.log_file, encoding='utf-8')
            handler.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s - %(message)s', datefmt='%Y/%m/%d %H:%M'))
            self._logger.addHandler(handler)

    def _current_date_str(self):
        # 현재 날짜를 'YYYYMMDD' 형식으로 반환하는 메서드
        return datetime.datetime.now().strftime("%Y%m%d")

    def log(self, msg, level='DEBUG'):
        """지정된 로그 레벨로 메시지를 기록하고 콘솔에도 출력합니다."""
        level = level.upper()
        if level not in _LEVELS:
            print(f"알 수 없는 로그 레벨: {level}")
            return

        self._logger.log(_LEVELS[level], msg)

        if self.console and level != "DEBUG":
            print(f"{level}: {msg}")

    def get_log_paths(self):
        """현재 로그 파일 경로를 반환하는 메서드."""
        return self.log_file
