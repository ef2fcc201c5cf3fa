import logging

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = 'en'

TRANSLATIONS = {
    'home': {'en': 'Home', 'vi': 'Trang chủ'},
    'matches': {'en': 'Matches', 'vi': 'Trận đấu'},
    'leaderboard': {'en': 'Leaderboard', 'vi': 'Bảng xếp hạng'},
    'my_predictions': {'en': 'My Predictions', 'vi': 'Dự đoán của tôi'},
    'login': {'en': 'Login', 'vi': 'Đăng nhập'},
    'register': {'en': 'Register', 'vi': 'Đăng ký'},
    'logout': {'en': 'Logout', 'vi': 'Đăng xuất'},
    'welcome_message': {'en': 'Welcome to Football Predictor', 'vi': 'Chào mừng đến với Dự đoán Bóng đá'},
    'predict_scores': {'en': 'Predict Scores', 'vi': 'Dự đoán Tỷ số'},
    'score_points': {'en': 'Score Points', 'vi': 'Ghi điểm'},
    'climb_leaderboard': {'en': 'Climb Leaderboard', 'vi': 'Leo Bảng xếp hạng'},
    'admin_dashboard': {'en': 'Admin Dashboard', 'vi': 'Bảng điều khiển Quản trị'},
    'predict_match_scores': {'en': 'Predict match scores', 'vi': 'Dự đoán tỷ số trận đấu'},
    'compete_with_friends': {'en': 'compete with friends', 'vi': 'cạnh tranh với bạn bè'},
    'track_accuracy': {'en': 'track your prediction accuracy', 'vi': 'theo dõi độ chính xác dự đoán của bạn'},
    'how_it_works': {'en': 'How it works', 'vi': 'Cách thức hoạt động'},
    'submit_predictions': {'en': 'Submit your predictions before matches begin', 'vi': 'Gửi dự đoán của bạn trước khi trận đấu bắt đầu'},
    'earn_points': {'en': 'Earn points for accurate predictions', 'vi': 'Nhận điểm cho các dự đoán chính xác'},
    'compete': {'en': 'Compete with others to reach the top', 'vi': 'Cạnh tranh với người khác để đạt vị trí cao nhất'},
    'sign_up_now': {'en': 'Sign Up Now', 'vi': 'Đăng ký ngay'},
    'view_upcoming_matches': {'en': 'View Upcoming Matches', 'vi': 'Xem các trận đấu sắp tới'},
    'scoring_system': {'en': 'Scoring System', 'vi': 'Hệ thống tính điểm'},
    'exact_score': {'en': 'Exact score prediction', 'vi': 'Dự đoán tỷ số chính xác'},
    'correct_difference': {'en': 'Correct result and goal difference', 'vi': 'Kết quả đúng và hiệu số bàn thắng'},
    'correct_result': {'en': 'Correct result only', 'vi': 'Chỉ kết quả đúng'},
    'points': {'en': 'points', 'vi': 'điểm'},
    'upcoming_matches': {'en': 'Upcoming Matches', 'vi': 'Trận đấu sắp tới'},
    'vs': {'en': 'vs', 'vi': 'vs'},
    'predict': {'en': 'Predict', 'vi': 'Dự đoán'},
    'your_prediction': {'en': 'Your Prediction', 'vi': 'Dự đoán của bạn'},
    'submit': {'en': 'Submit', 'vi': 'Gửi'},
    'cancel': {'en': 'Cancel', 'vi': 'Hủy'},
    'dark_mode': {'en': 'Dark Mode', 'vi': 'Chế độ tối'},
    'light_mode': {'en': 'Light Mode', 'vi': 'Chế độ sáng'},
    'language': {'en': 'Language', 'vi': 'Ngôn ngữ'},
    'finished': {'en': 'Finished', 'vi': 'Đã kết thúc'},
    'upcoming': {'en': 'Upcoming', 'vi': 'Sắp diễn ra'},
    'live': {'en': 'Live', 'vi': 'Đang diễn ra'},
    'all': {'en': 'All', 'vi': 'Tất cả'},
    'credits': {'en': 'Credits', 'vi': 'Tín dụng'},
    'earn_credits': {'en': 'Earn credits by solving math problems', 'vi': 'Kiếm tín dụng bằng cách giải toán'},
    'no_matches': {'en': 'No matches right now', 'vi': 'Hiện không có trận đấu nào'},
}


def translate(key, language=DEFAULT_LANGUAGE):
    entry = TRANSLATIONS.get(key)
    if entry is None:
        logger.warning('Translation key "%s" not found.', key)
        return key
    return entry.get(language) or entry[DEFAULT_LANGUAGE]


def translations_for(language):
    return {key: translate(key, language) for key in TRANSLATIONS}
