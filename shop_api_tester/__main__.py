from shop_api_tester.ui.main_window import run_app

run_app()
