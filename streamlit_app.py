import logging

import streamlit as st

from utils.config import Config
from utils.session import init_session

# Configure logging once
logging.basicConfig(
    level=Config.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

init_session()

pg = st.navigation(
    [
        "pages/1_📥_Load_Games.py",
        "pages/2_⏱️_Time_Usage.py",
    ]
)
pg.run()
