"""
Telegram bot: opens the mini app and serves quick predictions in chat
"""
import logging
from typing import Optional

from aiogram import Bot, Dispatcher, F, Router, html
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from aiogram.filters import Command, CommandStart, or_f
from aiogram.types import KeyboardButton, Message, ReplyKeyboardMarkup, WebAppInfo

from bettingai import __version__
from bettingai.config import Settings
from bettingai.engine import PredictionEngine
from bettingai.exceptions import PredictionError
from bettingai.models import Prediction

logger = logging.getLogger(__name__)

OPEN_APP_BUTTON = "Open App"
HELP_BUTTON = "Help"
ABOUT_BUTTON = "About"

WELCOME_TEXT = """Hello {name}!

Welcome to <b>Betting AI</b>

I will help you generate random predictions for sports events!

<b>How it works:</b>
1. Upload a screenshot of an event
2. Click "Analyze"
3. Get a smart prediction

<b>Warning!</b> This is an entertainment app. Predictions are generated randomly. Do not use for real betting!

Click the button below to start"""

HELP_TEXT = """<b>Help</b>

<b>Commands:</b>
/start - Start bot
/help - Show this help
/about - About project
/quick - Quick prediction without image

<b>How to use Mini App:</b>
1. Click "Open App"
2. Upload screenshot of match
3. Or paste screenshot (Ctrl+V)
4. Click "Analyze"
5. Get random prediction

<b>Supported formats:</b>
JPEG, PNG, GIF, WebP
Max size: 10 MB

<b>Important!</b>
This is entertainment project
Predictions are random
Do not use for real betting"""

ABOUT_TEXT = """<b>About "Betting AI"</b>

This is entertainment Telegram Mini App for generating random predictions for sports events.

<b>Features:</b>
Image uploads
Event analysis
Random predictions

<b>Disclaimer:</b>
This app is created for entertainment purposes only. All predictions are generated randomly and have no relation to real analysis. Do not use it for making real betting decisions!

Version: {version}"""

UNKNOWN_TEXT = "Command not recognized. Click /help for help or use menu buttons."


def main_keyboard(webapp_url: str) -> ReplyKeyboardMarkup:
    """Reply keyboard with the mini app button and the info buttons"""
    return ReplyKeyboardMarkup(
        keyboard=[
            [KeyboardButton(text=OPEN_APP_BUTTON, web_app=WebAppInfo(url=webapp_url))],
            [KeyboardButton(text=HELP_BUTTON), KeyboardButton(text=ABOUT_BUTTON)],
        ],
        resize_keyboard=True,
    )


def format_prediction_message(prediction: Prediction) -> str:
    """HTML chat message for a prediction"""
    return "\n".join([
        f"{prediction.emoji} <b>Quick Prediction</b>",
        "",
        f"<b>Bet:</b> {html.quote(prediction.bet_type)}",
        "",
        "<b>Reason:</b>",
        html.quote(prediction.reason),
        "",
        f"<b>Probability:</b> {prediction.probability}%",
        f"<b>Confidence:</b> {prediction.confidence}/10",
        "",
        "<b>Analysis:</b>",
        html.quote(prediction.analysis),
        "",
        "Prediction generated randomly!",
    ])


def build_router(engine: PredictionEngine, webapp_url: str) -> Router:
    """
    Register the bot's message handlers

    Args:
        engine: Prediction engine used by /quick
        webapp_url: URL opened by the mini app button
    """
    router = Router(name="bettingai")
    keyboard = main_keyboard(webapp_url)

    @router.message(CommandStart())
    async def cmd_start(message: Message):
        name = message.from_user.first_name if message.from_user else None
        await message.answer(WELCOME_TEXT.format(name=html.quote(name or "friend")),
                             reply_markup=keyboard)

    @router.message(or_f(Command("help"), F.text == HELP_BUTTON))
    async def cmd_help(message: Message):
        await message.answer(HELP_TEXT)

    @router.message(or_f(Command("about"), F.text == ABOUT_BUTTON))
    async def cmd_about(message: Message):
        await message.answer(ABOUT_TEXT.format(version=__version__))

    @router.message(Command("quick"))
    async def cmd_quick(message: Message):
        await message.answer("Generating prediction...")
        try:
            prediction = engine.generate()
        except PredictionError:
            logger.exception("Generation error")
            await message.answer("Error generating prediction")
            return
        logger.info("Quick prediction for chat %s: %s", message.chat.id, prediction.bet_type)
        await message.answer(format_prediction_message(prediction))

    @router.message()
    async def fallback(message: Message):
        text = message.text or ""
        if text.startswith("/") or text == OPEN_APP_BUTTON:
            return
        await message.answer(UNKNOWN_TEXT, reply_markup=keyboard)

    return router


def create_bot(settings: Settings,
               engine: Optional[PredictionEngine] = None):
    """
    Create the bot and its dispatcher

    Returns:
        Tuple of (bot, dispatcher)
    """
    engine = engine if engine is not None else PredictionEngine(seed=settings.seed)
    bot = Bot(settings.require_bot_token(),
              default=DefaultBotProperties(parse_mode=ParseMode.HTML))
    dp = Dispatcher()
    dp.include_router(build_router(engine, settings.webapp_url))
    return bot, dp


async def run_bot(settings: Settings, engine: Optional[PredictionEngine] = None) -> None:
    """Start long polling until cancelled"""
    bot, dp = create_bot(settings, engine)
    logger.info("Telegram bot started, WebApp URL: %s", settings.webapp_url)
    try:
        await dp.start_polling(bot)
    finally:
        await bot.session.close()
