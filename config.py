"""
Configuration File for Forecasting Pipeline

Central place to configure all parameters for the forecasting system.
Modify values here to experiment with different settings.
"""

# ==============================================================================
# DATA
# ==============================================================================
DATA_CONFIG = {
    'generate_new_data': True,  # Set False to use existing data
    'data_path': 'data/train.csv',  # Source transactions (generated here if enabled)
    'start_date': '2022-01-01',
    'n_months': 24,
    'categories': ['Electronics', 'Furniture', 'Clothing', 'Beauty'],
    'transactions_per_month': None,  # None = category-specific volume
    'seed': 42
}

# ==============================================================================
# TRAIN/TEST SPLIT
# ==============================================================================
SPLIT_CONFIG = {
    'test_fraction': 0.2,  # Held out per category (floor of count * fraction)
    'seed': None           # None = new shuffle every run; set an int to reproduce
}

# ==============================================================================
# BEST-SELLER CLASSIFIER CONFIGURATION
# ==============================================================================
CLASSIFIER_CONFIG = {
    # Evaluation order; on equal macro accuracy the earlier trainer wins
    'trainers': ['SDCA', 'LightGBM', 'AveragedPerceptronOVA'],

    # Maximum-entropy (multinomial logistic regression)
    'sdca_params': {
        'C': 1.0,
        'max_iter': 1000
    },

    # LightGBM multiclass
    'lgbm_num_boost_round': 100,
    'lgbm_params': {
        'boosting_type': 'gbdt',
        'num_leaves': 31,
        'learning_rate': 0.1,
        'min_data_in_leaf': 1,
        'verbose': -1,
        'seed': 42
    },

    # Averaged perceptron (one-versus-all, SGDClassifier with loss='perceptron')
    'perceptron_params': {
        'max_iter': 10,
        'tol': None,
        'random_state': 42
    }
}

# ==============================================================================
# REVENUE REGRESSION CONFIGURATION
# ==============================================================================
REGRESSION_CONFIG = {
    'target_month': '05',  # Month to forecast revenue for (MM)
    'num_boost_round': 100,
    'params': {
        'objective': 'regression',
        'metric': 'mae',
        'boosting_type': 'gbdt',
        'num_leaves': 20,
        'learning_rate': 0.2,
        'min_data_in_leaf': 10,
        'verbose': -1,
        'seed': 42
    }
}

# ==============================================================================
# OUTPUT CONFIGURATION
# ==============================================================================
OUTPUT_CONFIG = {
    'output_dir': 'outputs',
    'model_dir': 'models',
    'data_dir': 'data',
    'holdout_path': 'data/test.csv',  # Held-out pool, rewritten every run
    'classifier_model_path': 'models/best_category_model.pkl',
    'revenue_model_path': 'models/revenue_model.pkl'
}

# ==============================================================================
# VISUALIZATION
# ==============================================================================
VISUALIZATION_CONFIG = {
    'create_plots': True
}
