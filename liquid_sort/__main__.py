import logging

from liquid_sort.config import LOG_FORMAT, LOG_LEVEL
from liquid_sort.game import Game


# ===================== 入口 ===================== #
def main():
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
    # pygame 仅在真正打开窗口时导入
    from liquid_sort.view import View

    game = Game()
    view = View(game)
    view.run()


if __name__ == "__main__":
    main()
